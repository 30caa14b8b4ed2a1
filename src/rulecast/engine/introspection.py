"""Validator introspection: which field validators belong to a schema property,
and which validators are merged in through include composition."""

from __future__ import annotations

import logging

from rulecast.core.naming import names_match
from rulecast.engine.diagnostics import ApplyResult, DiagnosticCode, DiagnosticLevel
from rulecast.validators.field_validators import FieldValidator
from rulecast.validators.model import ModelValidator

log = logging.getLogger(__name__)


def field_validators_for(
    validator: ModelValidator,
    field_name: str,
    *,
    ignore_case: bool = True,
    ignore_separators: bool = False,
) -> list[FieldValidator]:
    """Return the validators attached directly to ``field_name``, in declaration order.

    Unknown fields yield an empty list.  Rules guarded by ``when()`` are left
    out, as conditional includes are.
    """
    result: list[FieldValidator] = []
    for rule in validator.property_rules():
        if not names_match(
            rule.property_name,
            field_name,
            ignore_case=ignore_case,
            ignore_separators=ignore_separators,
        ):
            continue
        if not rule.has_no_condition():
            log.debug("Skipping conditional rule for %s in %s", rule.property_name, _owner_name(validator))
            continue
        result.extend(rule.validators)
    return result


def included_validators_of(
    validator: ModelValidator,
    *,
    result: ApplyResult | None = None,
) -> list[ModelValidator]:
    """Resolve the validators included without a condition.

    Conditional includes are skipped: there is no instance to evaluate the
    condition against while generating a schema.  Each include adapter is
    resolved through its ``resolves_to()`` capability; adapters that lack it,
    raise, or resolve to nothing are skipped with a warning.
    """
    owner = _owner_name(validator)
    resolved: list[ModelValidator] = []

    for include in validator.include_rules():
        if not include.has_no_condition():
            log.debug("Skipping conditional include %r in %s", include.adapter, owner)
            continue

        adapter = include.adapter
        resolve = getattr(adapter, "resolves_to", None)
        if not callable(resolve):
            _warn(
                result,
                DiagnosticCode.INCLUDE_UNRESOLVED,
                f"Include adapter {type(adapter).__name__} in {owner} cannot resolve its validator",
            )
            continue

        try:
            included = resolve()
        except Exception:
            log.warning("Resolving included validator %r in %s failed", adapter, owner, exc_info=True)
            if result is not None:
                result.add(
                    DiagnosticLevel.WARNING,
                    DiagnosticCode.INCLUDE_FAILED,
                    f"Resolving included validator {type(adapter).__name__} in {owner} failed",
                )
            continue

        if included is None:
            _warn(
                result,
                DiagnosticCode.INCLUDE_UNRESOLVED,
                f"Include adapter {type(adapter).__name__} in {owner} resolved to no validator",
            )
            continue

        resolved.append(included)

    return resolved


def _warn(result: ApplyResult | None, code: DiagnosticCode, message: str) -> None:
    log.warning("%s, skipping", message)
    if result is not None:
        result.add(DiagnosticLevel.WARNING, code, message)


def _owner_name(validator: ModelValidator) -> str:
    if validator.model_type is not None:
        return f"{type(validator).__name__}[{validator.model_type.__name__}]"
    return type(validator).__name__

"""File-backed validator factory: declarative validators from YAML or JSON.

File layout::

    validators:
      Customer:
        properties:
          name:
            - not_empty
            - max_length: 50
          age:
            - inclusive_between: [18, 130]
        include:
          - Address

Validators are keyed by model class name.  Each property entry is either a
bare builder method name or a single-key mapping of method name to
arguments (list → positional, mapping → keyword, scalar → single argument).
PyYAML is only required for ``.yaml`` / ``.yml`` files.
"""

from __future__ import annotations

import functools
import json
import logging
import threading
from pathlib import Path
from typing import Any

from rulecast.core.exceptions import ValidatorDefinitionError
from rulecast.validators.model import ModelValidator, RuleBuilder

log = logging.getLogger(__name__)

_BUILDER_METHODS = frozenset(
    {
        "not_null",
        "not_empty",
        "length",
        "min_length",
        "max_length",
        "exact_length",
        "matches",
        "email_address",
        "greater_than",
        "greater_than_or_equal_to",
        "less_than",
        "less_than_or_equal_to",
        "equal",
        "inclusive_between",
        "exclusive_between",
    }
)


class FileValidatorFactory:
    """Builds :class:`ModelValidator` instances from a definitions file.

    The file is lazy-loaded on first lookup; built validators are cached
    per model name so repeated lookups and includes share one instance.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._definitions: dict[str, dict[str, Any]] | None = None
        self._built: dict[str, ModelValidator] = {}
        self._lock = threading.RLock()

    def get_validator(self, model_type: type) -> ModelValidator | None:
        """Return the validator defined for ``model_type.__name__``, if any."""
        return self.get_validator_by_name(model_type.__name__, model_type=model_type)

    def get_validator_by_name(self, name: str, *, model_type: type | None = None) -> ModelValidator | None:
        self._ensure_loaded()
        assert self._definitions is not None
        with self._lock:
            if name in self._built:
                cached = self._built[name]
                # Built untyped when first reached through an include
                if cached.model_type is None and model_type is not None:
                    cached.model_type = model_type
                return cached
            definition = self._definitions.get(name)
            if definition is None:
                return None
            validator = self._build(name, definition, model_type)
            self._built[name] = validator
            return validator

    def model_names(self) -> list[str]:
        self._ensure_loaded()
        assert self._definitions is not None
        return sorted(self._definitions)

    # ── Loading ─────────────────────────────────────────────────────

    def _ensure_loaded(self) -> None:
        """Lazy-load the definitions file on first access."""
        if self._definitions is not None:
            return

        if not self._path.exists():
            raise FileNotFoundError(f"Validator definitions file not found: {self._path}")

        raw_text = self._path.read_text(encoding="utf-8")

        if self._path.suffix in (".yaml", ".yml"):
            try:
                import yaml
            except ImportError as exc:
                raise ImportError(
                    "PyYAML is required for YAML validator files. "
                    "Install with: pip install rulecast[yaml]"
                ) from exc
            data = yaml.safe_load(raw_text) or {}
        else:
            data = json.loads(raw_text)

        validators = data.get("validators", {})
        if not isinstance(validators, dict):
            raise ValidatorDefinitionError(f"'validators' must be a mapping in {self._path}")
        self._definitions = validators
        log.info("Loaded %d validator definition(s) from %s", len(validators), self._path)

    # ── Building ────────────────────────────────────────────────────

    def _build(self, name: str, definition: dict[str, Any], model_type: type | None) -> ModelValidator:
        validator = ModelValidator(model_type)

        for property_name, entries in (definition.get("properties") or {}).items():
            builder = validator.rule_for(property_name)
            for entry in entries or []:
                _apply_entry(builder, entry, f"{name}.{property_name}")

        for include_name in definition.get("include") or []:
            if not isinstance(include_name, str):
                raise ValidatorDefinitionError(
                    f"Include entries of {name} must be model names, got {include_name!r}"
                )
            validator.include(functools.partial(self._resolve_include, include_name))

        return validator

    def _resolve_include(self, name: str) -> ModelValidator:
        validator = self.get_validator_by_name(name)
        if validator is None:
            raise ValidatorDefinitionError(f"Included validator {name!r} is not defined in {self._path}")
        return validator


def _apply_entry(builder: RuleBuilder, entry: Any, where: str) -> None:
    if isinstance(entry, str):
        method_name, args = entry, None
    elif isinstance(entry, dict) and len(entry) == 1:
        method_name, args = next(iter(entry.items()))
    else:
        raise ValidatorDefinitionError(f"Invalid validator entry {entry!r} for {where}")

    if method_name not in _BUILDER_METHODS:
        raise ValidatorDefinitionError(f"Unknown validator {method_name!r} for {where}")

    method = getattr(builder, method_name)
    if args is None:
        method()
    elif isinstance(args, list):
        method(*args)
    elif isinstance(args, dict):
        method(**args)
    else:
        method(args)

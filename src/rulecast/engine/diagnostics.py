"""Diagnostics collected while applying rules, plus a fire-once log helper."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""

    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class DiagnosticCode(str, Enum):
    """What went wrong (or was skipped)."""

    FACTORY_MISSING = "factory_missing"
    FACTORY_FAILED = "factory_failed"
    VALIDATOR_MISSING = "validator_missing"
    RULE_FAILED = "rule_failed"
    INCLUDE_UNRESOLVED = "include_unresolved"
    INCLUDE_FAILED = "include_failed"
    INCLUDE_REVISITED = "include_revisited"
    INCLUDE_DEPTH_EXCEEDED = "include_depth_exceeded"
    OPERATION_FAILED = "operation_failed"


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal problem observed during one apply call."""

    level: DiagnosticLevel
    code: DiagnosticCode
    message: str
    model_type: str = ""
    property_name: str = ""
    rule_name: str = ""


@dataclass
class ApplyResult:
    """Outcome of one apply call.

    Schema mutations are committed as they happen; this only reports
    which rules fired and what was skipped.
    """

    model_type: str = ""
    applied: list[tuple[str, str]] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.level == DiagnosticLevel.WARNING)

    def has_warnings(self) -> bool:
        return self.warning_count > 0

    def add(
        self,
        level: DiagnosticLevel,
        code: DiagnosticCode,
        message: str,
        *,
        model_type: str = "",
        property_name: str = "",
        rule_name: str = "",
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            level=level,
            code=code,
            message=message,
            model_type=model_type or self.model_type,
            property_name=property_name,
            rule_name=rule_name,
        )
        self.diagnostics.append(diagnostic)
        return diagnostic

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    def merge(self, other: ApplyResult) -> ApplyResult:
        self.applied.extend(other.applied)
        self.diagnostics.extend(other.diagnostics)
        return self


class LazyLog:
    """Runs a logging callback at most once."""

    def __init__(self, logger: logging.Logger, action: Callable[[logging.Logger], None]) -> None:
        self._logger = logger
        self._action = action
        self._done = False

    def log_once(self) -> None:
        if self._done:
            return
        self._done = True
        self._action(self._logger)

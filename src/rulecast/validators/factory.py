"""Validator factories: look up the validator registered for a model type.

Usage::

    registry = ValidatorRegistry()
    registry.register(Customer, CustomerValidator)   # class, built lazily once
    registry.register(Address, AddressValidator())   # ready instance
    validator = registry.get_validator(Customer)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol, Union, runtime_checkable

from rulecast.core.exceptions import ValidatorResolutionError
from rulecast.validators.model import ModelValidator

log = logging.getLogger(__name__)

ValidatorSource = Union[ModelValidator, Callable[[], Any]]


@runtime_checkable
class IValidatorFactory(Protocol):
    """Protocol for validator lookup (registry, file-backed, framework DI)."""

    def get_validator(self, model_type: type) -> ModelValidator | None:
        """Return the validator for ``model_type`` or None when none is registered."""
        ...


class ValidatorRegistry:
    """In-memory model type -> validator mapping.

    Classes and factories are instantiated on first lookup and the instance
    is reused afterwards, so the registry is safe to share between calls.
    """

    def __init__(self) -> None:
        self._sources: dict[type, ValidatorSource] = {}
        self._instances: dict[type, ModelValidator] = {}
        self._lock = threading.Lock()

    def register(self, model_type: type, validator: ValidatorSource) -> None:
        """Register a validator instance, class or factory for ``model_type``."""
        if not isinstance(validator, ModelValidator) and not callable(validator):
            raise TypeError(
                f"Expected a ModelValidator or a factory for {model_type.__name__}, "
                f"got {type(validator).__name__}"
            )
        with self._lock:
            if model_type in self._sources:
                log.warning("Validator for %s already registered, overwriting", model_type.__name__)
            self._sources[model_type] = validator
            self._instances.pop(model_type, None)
        log.debug("Registered validator for %s", model_type.__name__)

    def unregister(self, model_type: type) -> None:
        with self._lock:
            self._sources.pop(model_type, None)
            self._instances.pop(model_type, None)

    def has(self, model_type: type) -> bool:
        return model_type in self._sources

    def registered_types(self) -> list[type]:
        return sorted(self._sources, key=lambda t: t.__name__)

    def get_validator(self, model_type: type) -> ModelValidator | None:
        """Return the validator for ``model_type``.

        Raises:
            ValidatorResolutionError: If a registered factory fails or
                returns something other than a ModelValidator.
        """
        with self._lock:
            cached = self._instances.get(model_type)
            if cached is not None:
                return cached
            source = self._sources.get(model_type)
            if source is None:
                return None
            if isinstance(source, ModelValidator):
                validator = source
            else:
                try:
                    validator = source()
                except Exception as exc:
                    raise ValidatorResolutionError(
                        f"Validator factory for {model_type.__name__} failed: {exc}"
                    ) from exc
                if not isinstance(validator, ModelValidator):
                    raise ValidatorResolutionError(
                        f"Validator factory for {model_type.__name__} returned "
                        f"{type(validator).__name__}"
                    )
            self._instances[model_type] = validator
            return validator

"""
Property validators - the components a ``PropertyRule`` runs.

Every component receives a ``PropertyValidatorContext`` and returns the
failures it found (an empty list when the value is valid).  Messages are
``str.format`` templates; ``{property_name}`` and ``{value}`` are always
available, plus any validator-specific placeholders.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..faults import RuleDefinitionFault
from .context import PropertyValidatorContext
from .results import ValidationFailure
from .selectors import RuleSetSelector

logger = logging.getLogger("rulewire.validation")


# ============================================================================
# Base
# ============================================================================

class PropertyValidator:
    """Base class for single-value checks."""

    default_message = "'{property_name}' is not valid."
    default_error_code: Optional[str] = None

    def __init__(self, message: str | None = None, error_code: str | None = None):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code or type(self).__name__

    def validate(self, context: PropertyValidatorContext) -> List[ValidationFailure]:
        if self.is_valid(context.property_value, context):
            return []
        return [self.failure(context)]

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        raise NotImplementedError

    def format_args(self) -> Dict[str, Any]:
        return {}

    def failure(self, context: PropertyValidatorContext) -> ValidationFailure:
        message = self.message.format(
            property_name=context.display_name,
            value=context.property_value,
            **self.format_args(),
        )
        return ValidationFailure(
            property_name=context.property_path,
            error_message=message,
            attempted_value=context.property_value,
            error_code=self.error_code,
        )


# ============================================================================
# Value Validators
# ============================================================================

class NotNoneValidator(PropertyValidator):
    """Reject ``None``."""

    default_message = "'{property_name}' must not be empty."

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        return value is not None

    def __repr__(self) -> str:
        return "NotNoneValidator()"


class NotEmptyValidator(PropertyValidator):
    """Reject ``None``, blank strings and empty collections."""

    default_message = "'{property_name}' must not be empty."

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        if hasattr(value, "__len__"):
            return len(value) > 0
        return True

    def __repr__(self) -> str:
        return "NotEmptyValidator()"


class LengthValidator(PropertyValidator):
    """Reject values whose ``len()`` falls outside ``[min_length, max_length]``."""

    default_message = "'{property_name}' must be between {min_length} and {max_length} characters."

    def __init__(
        self,
        min_length: int = 0,
        max_length: int | None = None,
        message: str | None = None,
        error_code: str | None = None,
    ):
        if max_length is not None and max_length < min_length:
            raise ValueError(f"max_length ({max_length}) is below min_length ({min_length})")
        if message is None:
            if max_length is None:
                message = "'{property_name}' must be at least {min_length} characters."
            elif min_length == 0:
                message = "'{property_name}' must be {max_length} characters or fewer."
        super().__init__(message, error_code)
        self.min_length = min_length
        self.max_length = max_length

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        if value is None or not hasattr(value, "__len__"):
            return True
        length = len(value)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length

    def format_args(self) -> Dict[str, Any]:
        return {"min_length": self.min_length, "max_length": self.max_length}

    def __repr__(self) -> str:
        return f"LengthValidator({self.min_length}, {self.max_length})"


class PredicateValidator(PropertyValidator):
    """
    Run a user predicate.

    With ``pass_instance=True`` the predicate receives ``(instance, value)``
    instead of ``(value)``.
    """

    default_message = "The specified condition was not met for '{property_name}'."

    def __init__(
        self,
        predicate: Callable[..., bool],
        message: str | None = None,
        error_code: str | None = None,
        *,
        pass_instance: bool = False,
    ):
        super().__init__(message, error_code)
        self.predicate = predicate
        self.pass_instance = pass_instance

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        if self.pass_instance:
            return bool(self.predicate(context.instance, value))
        return bool(self.predicate(value))

    def __repr__(self) -> str:
        return f"PredicateValidator({getattr(self.predicate, '__name__', self.predicate)!r})"


# ============================================================================
# Nested validators
# ============================================================================

class ChildValidatorAdaptor(PropertyValidator):
    """
    Run another validator against the property value.

    The nested validator is obtained from ``validator_provider`` every time
    the property is evaluated, so it may depend on per-run state (services,
    the owning instance, ...).  ``rule_sets`` restricts which nested rules
    execute; empty means all of them.

    ``None`` values are skipped without calling the provider. The provided
    validator must accept ``property_type`` (or, when that is unknown, the
    type of the value).
    """

    def __init__(
        self,
        validator_provider: Callable[[PropertyValidatorContext], Any],
        property_type: Any = None,
        rule_sets: tuple[str, ...] = (),
    ):
        super().__init__()
        self.validator_provider = validator_provider
        self.property_type = property_type
        self.rule_sets: tuple[str, ...] = tuple(rule_sets)

    def validate(self, context: PropertyValidatorContext) -> List[ValidationFailure]:
        instance = context.property_value
        if instance is None:
            return []

        validator = self.get_validator(context)
        if validator is None:
            return []

        if not callable(getattr(validator, "validate_context", None)):
            raise RuleDefinitionFault(
                context.property_path,
                f"nested validator provider returned {type(validator).__name__}, expected a Validator",
            )

        target = self.property_type if isinstance(self.property_type, type) else type(instance)
        can_validate = getattr(validator, "can_validate_instances_of", None)
        if can_validate is not None and not can_validate(target):
            raise RuleDefinitionFault(
                context.property_path,
                f"{type(validator).__name__} cannot validate instances of {target.__name__}",
            )

        child_context = context.parent_context.clone_for_child(
            instance,
            selector=RuleSetSelector(self.rule_sets),
            property_name=context.property_name,
        )
        logger.debug(
            "Running %s for '%s' (rule_sets=%s)",
            type(validator).__name__, context.property_path, list(self.rule_sets),
        )
        return list(validator.validate_context(child_context).failures)

    def get_validator(self, context: PropertyValidatorContext) -> Any:
        return self.validator_provider(context)

    def is_valid(self, value: Any, context: PropertyValidatorContext) -> bool:
        return not self.validate(context)

    def __repr__(self) -> str:
        name = getattr(self.property_type, "__name__", self.property_type)
        return f"ChildValidatorAdaptor({name!r}, rule_sets={list(self.rule_sets)!r})"

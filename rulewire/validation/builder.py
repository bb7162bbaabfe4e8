"""
Fluent rule builder returned by ``Validator.rule_for()``.

Usage::

    class CustomerValidator(Validator[Customer]):
        def __init__(self):
            super().__init__()
            self.rule_for("name").not_empty().max_length(50)
            self.rule_for("address").inject_validator()
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from ..config import DEFAULT_CONFIG, ValidationConfig
from .rules import PropertyRule
from .validators import (
    ChildValidatorAdaptor,
    LengthValidator,
    NotEmptyValidator,
    NotNoneValidator,
    PredicateValidator,
    PropertyValidator,
)

T = TypeVar("T")
TProperty = TypeVar("TProperty")


class RuleBuilder(Generic[T, TProperty]):
    """Attaches components to a single ``PropertyRule``. Every method returns ``self``."""

    __slots__ = ("rule", "config")

    def __init__(self, rule: PropertyRule, config: Optional[ValidationConfig] = None):
        self.rule = rule
        self.config = config or DEFAULT_CONFIG

    @property
    def property_name(self) -> str:
        return self.rule.property_name

    @property
    def property_type(self) -> Any:
        return self.rule.property_type

    def split_rule_sets(self, rule_sets: Any) -> tuple[str, ...]:
        """Normalise rule-set names the way the owning validator does (``"Create,Update"``)."""
        return self.config.split_rule_sets(rule_sets)

    def set_validator(self, component: PropertyValidator) -> RuleBuilder[T, TProperty]:
        self.rule.add_component(component)
        return self

    def set_nested_validator(self, validator: Any, *rule_sets: str) -> RuleBuilder[T, TProperty]:
        """Validate the property with an already constructed validator."""
        return self.set_validator(
            ChildValidatorAdaptor(
                lambda context: validator,
                self.rule.property_type,
                self.split_rule_sets(rule_sets),
            )
        )

    def inject_validator(
        self,
        *rule_sets: str,
        factory: Optional[Callable[[Any, Any], Any]] = None,
    ) -> RuleBuilder[T, TProperty]:
        """
        Validate the property with a validator resolved from the run's service provider.

        Without ``factory`` the validator registered for the property type is
        used; otherwise ``factory(services, parent_context)`` builds it.
        """
        from ..injection import inject_validator, inject_validator_using

        if factory is None:
            return inject_validator(self, *rule_sets)
        return inject_validator_using(self, factory, *rule_sets)

    # ── built-in checks ──────────────────────────────────────────────────

    def not_none(self, message: str | None = None) -> RuleBuilder[T, TProperty]:
        return self.set_validator(NotNoneValidator(message))

    def not_empty(self, message: str | None = None) -> RuleBuilder[T, TProperty]:
        return self.set_validator(NotEmptyValidator(message))

    def length(self, min_length: int, max_length: int, message: str | None = None) -> RuleBuilder[T, TProperty]:
        return self.set_validator(LengthValidator(min_length, max_length, message))

    def max_length(self, limit: int, message: str | None = None) -> RuleBuilder[T, TProperty]:
        return self.set_validator(LengthValidator(0, limit, message))

    def min_length(self, limit: int, message: str | None = None) -> RuleBuilder[T, TProperty]:
        return self.set_validator(LengthValidator(limit, None, message))

    def must(
        self,
        predicate: Callable[..., bool],
        message: str | None = None,
        *,
        pass_instance: bool = False,
    ) -> RuleBuilder[T, TProperty]:
        return self.set_validator(PredicateValidator(predicate, message, pass_instance=pass_instance))

    # ── options for the last component ───────────────────────────────────

    def with_message(self, message: str) -> RuleBuilder[T, TProperty]:
        self.rule.current_component.message = message
        return self

    def with_error_code(self, error_code: str) -> RuleBuilder[T, TProperty]:
        self.rule.current_component.error_code = error_code
        return self

    def with_name(self, display_name: str) -> RuleBuilder[T, TProperty]:
        self.rule.display_name = display_name
        return self

    def cascade(self, mode: str) -> RuleBuilder[T, TProperty]:
        if mode not in ("continue", "stop"):
            raise ValueError(f"Unknown cascade mode {mode!r}")
        self.rule.cascade_mode = mode
        return self

    def __repr__(self) -> str:
        return f"RuleBuilder({self.rule!r})"

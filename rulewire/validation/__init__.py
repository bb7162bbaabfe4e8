"""
rulewire Validation - declarative property rules with rule sets.

Provides:
- Validator: Base class, one rule per ``rule_for()`` call
- RuleBuilder: Fluent API attaching checks to a rule
- ValidationContext / PropertyValidatorContext: Run and property state
- RuleSetSelector: Partial execution by named rule sets
- Property validators, including ChildValidatorAdaptor for nested validators
- ValidationResult / ValidationFailure
"""

from .base import Validator
from .builder import RuleBuilder
from .context import PropertyValidatorContext, ValidationContext
from .results import ValidationFailure, ValidationResult
from .rules import PropertyRule
from .selectors import DEFAULT_RULE_SET, WILDCARD_RULE_SET, RuleSetSelector
from .validators import (
    ChildValidatorAdaptor,
    LengthValidator,
    NotEmptyValidator,
    NotNoneValidator,
    PredicateValidator,
    PropertyValidator,
)

__all__ = [
    # Core
    "Validator",
    "RuleBuilder",
    "PropertyRule",
    # Contexts
    "ValidationContext",
    "PropertyValidatorContext",
    # Rule sets
    "RuleSetSelector",
    "DEFAULT_RULE_SET",
    "WILDCARD_RULE_SET",
    # Components
    "PropertyValidator",
    "NotNoneValidator",
    "NotEmptyValidator",
    "LengthValidator",
    "PredicateValidator",
    "ChildValidatorAdaptor",
    # Results
    "ValidationFailure",
    "ValidationResult",
]

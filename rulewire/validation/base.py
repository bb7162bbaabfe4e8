"""
rulewire Validator Core - declarative validators built from property rules.

Architecture:
    Validator[T]
    └── PropertyRule (one per rule_for() call)
        └── PropertyValidator components (not_empty, must, nested, ...)

Usage::

    class AddressValidator(Validator[Address]):
        def __init__(self):
            super().__init__()
            self.rule_for("street").not_empty()
            with self.rule_set("Create"):
                self.rule_for("postcode").not_empty()

    result = AddressValidator().validate(address, rule_sets=["Create"])
    if not result.is_valid:
        errors = result.errors  # {"street": ["'street' must not be empty."]}

The model type comes from the generic parameter, or from a ``model``
class attribute when subclassing without one.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Mapping
from contextlib import contextmanager
from typing import (
    Any,
    Callable,
    ClassVar,
    Generic,
    Iterator,
    List,
    Optional,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ..config import DEFAULT_CONFIG, ValidationConfig
from ..faults import RuleDefinitionFault, ValidationFault
from .builder import RuleBuilder
from .context import ValidationContext
from .results import ValidationFailure, ValidationResult
from .rules import PropertyRule
from .selectors import RuleSetSelector

logger = logging.getLogger("rulewire.validation")

T = TypeVar("T")


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _attribute_accessor(name: str) -> Callable[[Any], Any]:
    def access(instance: Any) -> Any:
        if isinstance(instance, Mapping):
            return instance.get(name)
        return getattr(instance, name)
    access.__name__ = f"get_{name}"
    return access


class Validator(Generic[T]):
    """
    Base validator.

    Subclasses declare their rules in ``__init__``. Instances are cheap and
    stateless between runs, so they may be registered with any DI scope.
    """

    model: ClassVar[Any] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("model") is not None:
            return
        for base in getattr(cls, "__orig_bases__", ()):
            origin = get_origin(base)
            if isinstance(origin, type) and issubclass(origin, Validator):
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls.model = args[0]
                    return

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._rules: List[PropertyRule] = []
        self._rule_set_stack: List[tuple[str, ...]] = []

    @property
    def rules(self) -> tuple[PropertyRule, ...]:
        return tuple(self._rules)

    # ── rule declaration ─────────────────────────────────────────────────

    def rule_for(
        self,
        expression: Union[str, Callable[[Any], Any]],
        property_type: Any = None,
        *,
        name: Optional[str] = None,
    ) -> RuleBuilder:
        """
        Start a rule for a property.

        Args:
            expression: Attribute name, or a callable extracting the value.
            property_type: Type of the property. Inferred from the model's
                type hints when omitted and ``expression`` is an attribute name.
            name: Property name used in failures. Required for lambdas.
        """
        if isinstance(expression, str):
            property_name = name or expression
            accessor = _attribute_accessor(expression)
        elif callable(expression):
            property_name = name or getattr(expression, "__name__", "")
            if not property_name or property_name == "<lambda>":
                raise RuleDefinitionFault(repr(expression), "pass name= when using a lambda")
            accessor = expression
        else:
            raise RuleDefinitionFault(repr(expression), "expected an attribute name or a callable")

        if property_type is None and isinstance(expression, str):
            property_type = self._hinted_type(expression)

        rule = PropertyRule(
            property_name,
            accessor,
            property_type,
            rule_sets=self._rule_set_stack[-1] if self._rule_set_stack else (),
            cascade_mode=self.config.cascade_mode,
        )
        self._rules.append(rule)
        return RuleBuilder(rule, self.config)

    @contextmanager
    def rule_set(self, *names: str) -> Iterator[None]:
        """Tag every rule declared inside the block with the given rule sets."""
        rule_sets = self.config.split_rule_sets(names)
        if not rule_sets:
            raise RuleDefinitionFault(type(self).__name__, "rule_set() needs at least one name")
        self._rule_set_stack.append(rule_sets)
        try:
            yield
        finally:
            self._rule_set_stack.pop()

    def _hinted_type(self, attribute: str) -> Any:
        if self.model is None or isinstance(self.model, TypeVar):
            return None
        try:
            hints = get_type_hints(self.model)
        except Exception as e:
            logger.debug("Could not read type hints of %r: %s", self.model, e)
            return None
        hint = hints.get(attribute)
        return _unwrap_optional(hint) if hint is not None else None

    # ── validation ───────────────────────────────────────────────────────

    def can_validate_instances_of(self, type_: type) -> bool:
        if self.model is None or not isinstance(self.model, type):
            return True
        return isinstance(type_, type) and issubclass(type_, self.model)

    def validate(
        self,
        instance: T,
        *,
        rule_sets: Any = None,
        root_data: Optional[dict[str, Any]] = None,
    ) -> ValidationResult:
        """
        Validate *instance*.

        Args:
            instance: Object to validate.
            rule_sets: Rule-set names (iterable or separated string). Empty runs all rules.
            root_data: Side data for the run (shared with nested validators).
        """
        context = ValidationContext(
            instance,
            selector=RuleSetSelector(self.config.split_rule_sets(rule_sets)),
            root_context_data=root_data,
        )
        return self.validate_context(context)

    def validate_context(self, context: ValidationContext) -> ValidationResult:
        """Validate ``context.instance_to_validate`` using an existing root context."""
        instance = context.instance_to_validate
        if not self.can_validate_instances_of(type(instance)):
            raise TypeError(
                f"{type(self).__name__} cannot validate instances of {type(instance).__name__}; "
                f"it validates {getattr(self.model, '__name__', self.model)}"
            )

        failures: List[ValidationFailure] = []
        for rule in self._rules:
            if context.selector.can_execute(rule.rule_sets):
                failures.extend(rule.validate(context))

        context.failures.extend(failures)
        return ValidationResult(failures=failures, rule_sets_executed=context.selector.rule_sets)

    def validate_or_raise(self, instance: T, **kwargs: Any) -> ValidationResult:
        """Like ``validate()`` but raise ``ValidationFault`` when invalid."""
        result = self.validate(instance, **kwargs)
        if not result.is_valid:
            raise ValidationFault(result.errors, metadata={"validator": type(self).__name__})
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={getattr(self.model, '__name__', self.model)}, rules={len(self._rules)})"

"""
Property rules.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from .context import PropertyValidatorContext, ValidationContext
from .results import ValidationFailure
from .validators import PropertyValidator


class PropertyRule:
    """
    All checks declared for one property.

    Components run in declaration order. With ``cascade_mode="stop"`` the
    rule ends at the first component that reports a failure.
    """

    __slots__ = (
        "property_name",
        "accessor",
        "property_type",
        "display_name",
        "components",
        "rule_sets",
        "cascade_mode",
    )

    def __init__(
        self,
        property_name: str,
        accessor: Callable[[Any], Any],
        property_type: Any = None,
        *,
        rule_sets: tuple[str, ...] = (),
        cascade_mode: str = "continue",
        display_name: Optional[str] = None,
    ):
        self.property_name = property_name
        self.accessor = accessor
        self.property_type = property_type
        self.display_name = display_name
        self.components: List[PropertyValidator] = []
        self.rule_sets = tuple(rule_sets)
        self.cascade_mode = cascade_mode

    def add_component(self, component: PropertyValidator) -> None:
        self.components.append(component)

    @property
    def current_component(self) -> PropertyValidator:
        if not self.components:
            raise IndexError(f"Rule for '{self.property_name}' has no validators yet")
        return self.components[-1]

    def validate(self, context: ValidationContext) -> List[ValidationFailure]:
        """Evaluate every component against the property value of ``context``'s instance."""
        value = self.accessor(context.instance_to_validate)
        failures: List[ValidationFailure] = []

        for component in self.components:
            property_context = PropertyValidatorContext(
                context,
                self,
                self.property_name,
                value,
                display_name=self.display_name,
            )
            found = component.validate(property_context)
            failures.extend(found)
            if found and self.cascade_mode == "stop":
                break

        return failures

    def __repr__(self) -> str:
        return (
            f"PropertyRule({self.property_name!r}, components={len(self.components)}, "
            f"rule_sets={list(self.rule_sets)!r})"
        )

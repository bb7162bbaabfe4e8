"""
Validation contexts.

A validation run has exactly one *root* context (``ValidationContext``)
holding cross-cutting side data in ``root_context_data``. Each property
evaluation gets a short-lived ``PropertyValidatorContext`` that points back
to that root.

Both flavours expose ``root_context`` so callers can reach the run state
without inspecting which flavour they hold::

    ctx.root_context.root_context_data["tenant"] = tenant
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, TypeVar

from .results import ValidationFailure
from .selectors import RuleSetSelector

if TYPE_CHECKING:
    from .rules import PropertyRule

T = TypeVar("T")


class ValidationContext(Generic[T]):
    """
    Root context of one validation run.

    Attributes:
        instance_to_validate: The object the current validator checks.
        root_context_data: Side-data mapping shared by every context of the run,
            nested validators included.
        selector: Decides which rules execute.
        property_chain: Path prefix applied to failures (``"address"`` for a
            nested address validator).
        failures: Failures collected so far.
    """

    __slots__ = ("instance_to_validate", "root_context_data", "selector", "property_chain", "failures")

    def __init__(
        self,
        instance_to_validate: T,
        *,
        selector: Optional[RuleSetSelector] = None,
        root_context_data: Optional[Dict[str, Any]] = None,
        property_chain: str = "",
    ):
        self.instance_to_validate = instance_to_validate
        self.root_context_data: Dict[str, Any] = root_context_data if root_context_data is not None else {}
        self.selector = selector or RuleSetSelector()
        self.property_chain = property_chain
        self.failures: List[ValidationFailure] = []

    @property
    def root_context(self) -> ValidationContext:
        return self

    def clone_for_child(
        self,
        instance: Any,
        *,
        selector: Optional[RuleSetSelector] = None,
        property_name: str = "",
    ) -> ValidationContext:
        """
        Create the root context for a nested validator.

        The child shares ``root_context_data`` (same dict object) so services
        registered for the run stay reachable from nested rules.
        """
        chain = self.property_chain
        if property_name:
            chain = f"{chain}.{property_name}" if chain else property_name
        return ValidationContext(
            instance,
            selector=selector if selector is not None else self.selector,
            root_context_data=self.root_context_data,
            property_chain=chain,
        )

    def __repr__(self) -> str:
        return (
            f"ValidationContext(instance={type(self.instance_to_validate).__name__}, "
            f"chain={self.property_chain!r}, selector={self.selector!r})"
        )


class PropertyValidatorContext:
    """State for evaluating one component of one property rule."""

    __slots__ = ("parent_context", "rule", "property_name", "display_name", "property_value")

    def __init__(
        self,
        parent_context: ValidationContext,
        rule: PropertyRule,
        property_name: str,
        property_value: Any,
        display_name: Optional[str] = None,
    ):
        self.parent_context = parent_context
        self.rule = rule
        self.property_name = property_name
        self.display_name = display_name or property_name
        self.property_value = property_value

    @property
    def root_context(self) -> ValidationContext:
        return self.parent_context

    @property
    def instance(self) -> Any:
        """The object that owns the property being validated."""
        return self.parent_context.instance_to_validate

    @property
    def property_path(self) -> str:
        """Full dotted path of the property within the run (``address.street``)."""
        chain = self.parent_context.property_chain
        return f"{chain}.{self.property_name}" if chain else self.property_name

    def __repr__(self) -> str:
        return f"PropertyValidatorContext(property={self.property_name!r})"

"""
Validation outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """One failed check against one property."""

    property_name: str
    error_message: str
    attempted_value: Any = None
    error_code: Optional[str] = None


@dataclass
class ValidationResult:
    """Outcome of a validation run."""

    failures: List[ValidationFailure] = field(default_factory=list)
    rule_sets_executed: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def errors(self) -> Dict[str, List[str]]:
        """``{property_path: [messages]}`` in failure order."""
        out: Dict[str, List[str]] = {}
        for failure in self.failures:
            out.setdefault(failure.property_name or "__all__", []).append(failure.error_message)
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "rule_sets": list(self.rule_sets_executed),
        }

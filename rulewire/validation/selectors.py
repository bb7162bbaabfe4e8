"""
Rule-set selection.
"""

from __future__ import annotations

from typing import Iterable

DEFAULT_RULE_SET = "default"
WILDCARD_RULE_SET = "*"


class RuleSetSelector:
    """
    Decides which rules run for a validation call.

    - No names: every rule runs.
    - Otherwise a rule runs when one of its rule sets is selected.
      Rules declared outside ``rule_set()`` belong to ``"default"``.
    - ``"*"`` selects every rule.
    """

    __slots__ = ("rule_sets",)

    def __init__(self, rule_sets: Iterable[str] = ()):
        self.rule_sets: tuple[str, ...] = tuple(rule_sets)

    @property
    def unrestricted(self) -> bool:
        return not self.rule_sets or WILDCARD_RULE_SET in self.rule_sets

    def can_execute(self, rule_sets: Iterable[str]) -> bool:
        if self.unrestricted:
            return True
        declared = tuple(rule_sets) or (DEFAULT_RULE_SET,)
        return any(name in self.rule_sets for name in declared)

    def __repr__(self) -> str:
        return f"RuleSetSelector({list(self.rule_sets)!r})"

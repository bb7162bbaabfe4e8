"""
DI-specific error types with rich diagnostics.
"""

from typing import List, Optional


class DIError(Exception):
    """Base exception for DI errors."""
    pass


class ProviderNotFoundError(DIError):
    """Provider not found for requested token."""

    def __init__(
        self,
        token: str,
        tag: Optional[str] = None,
        candidates: Optional[List[str]] = None,
        requested_by: Optional[str] = None,
    ):
        self.token = token
        self.tag = tag
        self.candidates = candidates or []
        self.requested_by = requested_by

        msg = f"No provider found for token={token}"
        if tag:
            msg += f" (tag={tag})"

        if requested_by:
            msg += f"\nRequested by: {requested_by}"

        if self.candidates:
            msg += "\n\nCandidates found:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"

        msg += "\n\nSuggested fixes:"
        msg += f"\n  - Register a provider for {token}"
        if self.candidates:
            msg += "\n  - Pass tag='...' to disambiguate"

        super().__init__(msg)


class DependencyCycleError(DIError):
    """Circular dependency detected while resolving."""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle

        msg = "Detected dependency cycle:"
        for i, token in enumerate(cycle):
            arrow = " -> " if i < len(cycle) - 1 else ""
            msg += f"\n  {token}{arrow}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Extract an interface to decouple directionally"
        msg += "\n  - Resolve one side lazily through a FactoryProvider"

        super().__init__(msg)


class ScopeViolationError(DIError):
    """Scope violation detected (e.g., request-scoped resolved from the app container)."""

    def __init__(
        self,
        provider_token: str,
        provider_scope: str,
        consumer_token: str,
        consumer_scope: str,
    ):
        self.provider_token = provider_token
        self.provider_scope = provider_scope
        self.consumer_token = consumer_token
        self.consumer_scope = consumer_scope

        msg = (
            f"Scope violation: {provider_scope}-scoped provider '{provider_token}' "
            f"requested from {consumer_scope}-scoped '{consumer_token}'. "
            f"\n\nScope rules forbid shorter-lived scopes from being injected into longer-lived scopes."
            f"\n\nSuggested fixes:"
            f"\n  - Resolve '{provider_token}' from container.create_request_scope()"
            f"\n  - Change '{provider_token}' to transient scope"
        )

        super().__init__(msg)

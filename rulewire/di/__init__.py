"""
rulewire Dependency Injection

Small synchronous DI container used to resolve validators and the services
they depend on while a validation run is in progress.

Key Features:
- Explicit scopes: singleton, app, request, transient
- Request-scoped child containers, one per validation run
- Constructor injection from type annotations
- Cycle detection during resolution
- Generic aliases as tokens (``Validator[Address]``)
"""

from .core import (
    Provider,
    ProviderMeta,
    Container,
    ResolveCtx,
    ServiceProvider,
    token_to_key,
)

from .providers import (
    ClassProvider,
    FactoryProvider,
    ValueProvider,
)

from .scopes import (
    SCOPES,
    Scope,
    can_resolve,
    is_known_scope,
)

from .errors import (
    DIError,
    ProviderNotFoundError,
    DependencyCycleError,
    ScopeViolationError,
)

__all__ = [
    # Core types
    "Provider",
    "ProviderMeta",
    "Container",
    "ResolveCtx",
    "ServiceProvider",
    "token_to_key",

    # Providers
    "ClassProvider",
    "FactoryProvider",
    "ValueProvider",

    # Scopes
    "SCOPES",
    "Scope",
    "can_resolve",
    "is_known_scope",

    # Errors
    "DIError",
    "ProviderNotFoundError",
    "DependencyCycleError",
    "ScopeViolationError",
]

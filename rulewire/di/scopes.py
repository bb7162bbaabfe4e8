"""
Scope rules used by ``Container``.

A scope decides two things: whether the owning container caches the
instance, and which containers may hand it out. A cached instance must not
outlive the container it was created for, so request-scoped providers are
only resolvable from request containers.
"""

from typing import Dict, NamedTuple


class Scope(NamedTuple):
    name: str
    cacheable: bool
    lifetime: int  # higher lives longer; transient has no lifetime of its own

    def can_inject_into(self, container_scope: "Scope") -> bool:
        if not self.cacheable:
            return True
        return self.lifetime >= container_scope.lifetime


SCOPES: Dict[str, Scope] = {
    "singleton": Scope("singleton", cacheable=True, lifetime=2),
    "app": Scope("app", cacheable=True, lifetime=2),
    "request": Scope("request", cacheable=True, lifetime=1),
    "transient": Scope("transient", cacheable=False, lifetime=0),
}


def is_known_scope(name: str) -> bool:
    return name in SCOPES


def can_resolve(provider_scope: str, container_scope: str) -> bool:
    """True when a ``provider_scope`` provider may be instantiated by a ``container_scope`` container."""
    provider = SCOPES.get(provider_scope)
    container = SCOPES.get(container_scope)
    if provider is None or container is None:
        return False
    return provider.can_inject_into(container)

"""
Core DI types and protocols.

Defines the fundamental contracts for the DI system and the synchronous
``Container`` that validation runs resolve validators and services from.
"""

from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
    runtime_checkable,
)
from dataclasses import dataclass, field
import logging

from .errors import DIError, DependencyCycleError, ProviderNotFoundError, ScopeViolationError
from .scopes import SCOPES, can_resolve, is_known_scope

logger = logging.getLogger("rulewire.di")

# Module-level cache: type -> "module.qualname" string
_type_key_cache: Dict[type, str] = {}

_MISSING = object()

T = TypeVar("T")


def token_to_key(token: Any) -> str:
    """
    Convert a token (type, string or generic alias) to its registry key.

    Types map to ``module.qualname``; generic aliases such as
    ``Validator[Address]`` map to their ``str()`` form, which embeds the
    qualified names of their arguments.
    """
    if isinstance(token, str):
        return token

    if isinstance(token, type):
        key = _type_key_cache.get(token)
        if key is None:
            key = f"{token.__module__}.{token.__qualname__}"
            _type_key_cache[token] = key
        return key

    return str(token)


@dataclass(frozen=True, slots=True)
class ProviderMeta:
    """Compact provider metadata."""
    name: str
    token: str  # Type name or string key
    scope: str  # "singleton", "app", "request", "transient"
    tags: tuple[str, ...] = field(default_factory=tuple)
    module: str = ""
    qualname: str = ""


class ResolveCtx:
    """
    Context for resolution operations.

    Tracks the resolution stack for cycle detection and diagnostics.
    Nested resolutions share the stack of the resolution that triggered them.
    """
    __slots__ = ("container", "stack")

    def __init__(self, container: "Container", stack: Optional[List[str]] = None):
        self.container = container
        self.stack: List[str] = stack if stack is not None else []

    def push(self, token: str) -> None:
        """Push token onto resolution stack."""
        if token in self.stack:
            raise DependencyCycleError(self.stack[self.stack.index(token):] + [token])
        self.stack.append(token)

    def pop(self) -> None:
        self.stack.pop()

    def resolve(self, token: Any, *, tag: Optional[str] = None, optional: bool = False) -> Any:
        """Resolve a dependency of the provider currently being instantiated."""
        return self.container._resolve(token, tag, optional, self)


@runtime_checkable
class Provider(Protocol):
    """
    Provider protocol - how to instantiate a dependency.

    All providers must implement this interface.
    """

    @property
    def meta(self) -> ProviderMeta:
        ...

    def instantiate(self, ctx: ResolveCtx) -> Any:
        ...


@runtime_checkable
class ServiceProvider(Protocol):
    """
    Service-resolution capability.

    Anything that can turn a token into an instance (or raise) qualifies;
    ``Container`` is the stock implementation.
    """

    def resolve(self, token: Any, *, tag: Optional[str] = None, optional: bool = False) -> Any:
        ...


class Container:
    """
    DI Container - manages provider instances and scopes.

    The app container owns singletons; ``create_request_scope()`` returns a
    cheap child that caches request-scoped instances for one validation run.
    """

    __slots__ = (
        "_providers",
        "_cache",
        "_scope",
        "_parent",
        "_finalizers",
    )

    def __init__(
        self,
        scope: str = "app",
        parent: Optional["Container"] = None,
    ):
        if not is_known_scope(scope):
            raise DIError(f"Unknown container scope '{scope}'")

        self._providers: Dict[str, Provider] = {}  # {cache_key: provider}
        self._cache: Dict[str, Any] = {}  # {cache_key: instance}
        self._scope = scope
        self._parent = parent
        self._finalizers: List[Callable[[], Any]] = []  # LIFO cleanup

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def parent(self) -> Optional["Container"]:
        return self._parent

    def register(self, provider: Provider, tag: Optional[str] = None) -> None:
        """
        Register a provider.

        Args:
            provider: Provider instance
            tag: Optional tag for disambiguation
        """
        self._store(provider.meta.token, provider, tag)

    def bind(
        self,
        token: Any,
        implementation: Type,
        scope: str = "app",
        tag: Optional[str] = None,
    ) -> None:
        """
        Bind a token (interface, string or generic alias) to an implementation class.

        Example:
            container.bind(Validator[Address], AddressValidator, scope="transient")
        """
        from .providers import ClassProvider

        self._store(token_to_key(token), ClassProvider(implementation, scope=scope), tag)

    def register_instance(
        self,
        token: Any,
        instance: Any,
        scope: str = "request",
        tag: Optional[str] = None,
    ) -> None:
        """
        Register a pre-instantiated object as a provider.

        Useful for objects created outside the DI system for the current
        run (the object under validation, the current user, ...).
        """
        from .providers import ValueProvider

        provider = ValueProvider(
            value=instance,
            token=token,
            scope=scope,
            name=f"{getattr(token, '__name__', token)}_instance",
        )
        self.register(provider, tag=tag)

    def resolve(
        self,
        token: Any,
        *,
        tag: Optional[str] = None,
        optional: bool = False,
    ) -> Any:
        """
        Resolve a dependency.

        Args:
            token: Type, string key or generic alias
            tag: Optional tag for disambiguation
            optional: If True, return None if not found instead of raising

        Returns:
            The resolved instance

        Raises:
            ProviderNotFoundError: If provider not found and not optional
            ScopeViolationError: If a request-scoped provider is resolved from the app container
            DependencyCycleError: If the provider graph loops back on itself
        """
        return self._resolve(token, tag, optional, None)

    def is_registered(self, token: Any, tag: Optional[str] = None) -> bool:
        """Check if a provider is registered for the token."""
        return self._lookup_provider(token_to_key(token), tag) is not None

    def create_request_scope(self) -> "Container":
        """
        Create a request-scoped child container.

        Providers registered on the child stay local to it; lookups fall back
        to the parent.
        """
        child = Container.__new__(Container)
        child._providers = {}
        child._cache = {}
        child._scope = "request"
        child._parent = self
        child._finalizers = []
        return child

    def shutdown(self) -> None:
        """Run finalizers of cached instances in LIFO order and clear the cache."""
        if not self._finalizers and not self._cache:
            return

        for finalizer in reversed(self._finalizers):
            try:
                finalizer()
            except Exception as e:
                logger.warning("Error during finalizer in %s container: %s", self._scope, e)

        self._finalizers.clear()
        self._cache.clear()

    # ── internals ────────────────────────────────────────────────────────

    def _store(self, token: str, provider: Provider, tag: Optional[str]) -> None:
        if not is_known_scope(provider.meta.scope):
            raise DIError(f"Unknown scope '{provider.meta.scope}' for provider {provider.meta.name}")

        key = self._make_cache_key(token, tag)

        # Idempotency: if same provider, ignore. If different, error.
        if key in self._providers:
            existing = self._providers[key]
            if existing == provider:
                return
            raise DIError(
                f"Provider for {token} (tag={tag}) already registered: {existing.meta.name}"
            )

        self._providers[key] = provider
        logger.debug("Registered %s for %s (scope=%s, tag=%s)", provider.meta.name, token, provider.meta.scope, tag)

    def _resolve(
        self,
        token: Any,
        tag: Optional[str],
        optional: bool,
        ctx: Optional[ResolveCtx],
    ) -> Any:
        token_key = token_to_key(token)

        # A container resolves itself as the service provider
        if token_key in _self_keys():
            return self

        cache_key = self._make_cache_key(token_key, tag)

        cached = self._cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return cached

        provider = self._lookup_provider(token_key, tag)

        if provider is None:
            if optional:
                return None
            self._raise_not_found(token_key, tag, ctx)

        scope = provider.meta.scope

        # Scope Delegation: singleton/app -> parent
        if self._parent is not None and scope in ("singleton", "app"):
            return self._parent._resolve(token, tag, optional, ctx)

        if not can_resolve(scope, self._scope):
            raise ScopeViolationError(
                provider_token=token_key,
                provider_scope=scope,
                consumer_token=f"Container(scope={self._scope})",
                consumer_scope=self._scope,
            )

        child_ctx = ResolveCtx(self, ctx.stack if ctx is not None else None)
        child_ctx.push(cache_key)
        try:
            instance = provider.instantiate(child_ctx)
        finally:
            child_ctx.pop()

        if SCOPES[scope].cacheable:
            self._cache[cache_key] = instance
            self._register_finalizer(instance)

        return instance

    def _make_cache_key(self, token: str, tag: Optional[str]) -> str:
        if tag:
            return f"{token}#{tag}"
        return token

    def _lookup_provider(
        self,
        token: str,
        tag: Optional[str],
    ) -> Optional[Provider]:
        """Lookup provider in current container or parent."""
        key = self._make_cache_key(token, tag)
        if key in self._providers:
            return self._providers[key]

        if self._parent:
            return self._parent._lookup_provider(token, tag)

        return None

    def _register_finalizer(self, instance: Any) -> None:
        if hasattr(instance, "__exit__"):
            self._finalizers.append(lambda: instance.__exit__(None, None, None))
        elif callable(getattr(instance, "shutdown", None)):
            self._finalizers.append(instance.shutdown)

    def _raise_not_found(self, token: str, tag: Optional[str], ctx: Optional[ResolveCtx]) -> None:
        """Raise ProviderNotFoundError with helpful diagnostics."""
        candidates = []
        container: Optional[Container] = self
        while container is not None:
            candidates.extend(key for key in container._providers if token in key)
            container = container._parent

        requested_by = None
        if ctx is not None and ctx.stack:
            requested_by = ctx.stack[-1]

        raise ProviderNotFoundError(
            token=token,
            tag=tag,
            candidates=candidates,
            requested_by=requested_by,
        )

    def __repr__(self) -> str:
        return f"Container(scope={self._scope!r}, providers={len(self._providers)})"


_SELF_KEYS: Optional[frozenset] = None


def _self_keys() -> frozenset:
    global _SELF_KEYS
    if _SELF_KEYS is None:
        _SELF_KEYS = frozenset((token_to_key(Container), token_to_key(ServiceProvider)))
    return _SELF_KEYS

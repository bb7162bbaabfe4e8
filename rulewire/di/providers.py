"""
Provider implementations for different instantiation strategies.
"""

from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints
import inspect
import types

from .core import ProviderMeta, ResolveCtx, token_to_key
from .errors import DIError


T = TypeVar("T")


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return (inner_type, is_optional) for ``Optional[X]`` / ``X | None``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(args) != len(get_args(annotation)):
            return args[0], True
    return annotation, False


def _signature_dependencies(func: Callable, owner: str, *, strict: bool) -> Dict[str, Dict[str, Any]]:
    """
    Extract dependencies from a callable's annotated parameters.

    Returns:
        Dict mapping parameter names to ``{"token": ..., "optional": bool}``
    """
    deps: Dict[str, Dict[str, Any]] = {}

    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return deps

    try:
        type_hints = get_type_hints(func)
    except Exception:
        type_hints = {}

    for param_name, param in sig.parameters.items():
        if param_name in ("self", "cls"):
            continue

        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = type_hints.get(param_name, param.annotation)
        has_default = param.default is not inspect.Parameter.empty

        if annotation is inspect.Parameter.empty:
            if has_default or not strict:
                continue
            raise DIError(
                f"Missing type annotation for parameter '{param_name}' in {owner}"
            )

        token, is_optional = _unwrap_optional(annotation)
        deps[param_name] = {"token": token, "optional": has_default or is_optional}

    return deps


class ClassProvider:
    """
    Provider that instantiates a class by resolving constructor dependencies.
    """

    __slots__ = ("_meta", "_cls", "_dependencies")

    def __init__(
        self,
        cls: Type[T],
        scope: str = "app",
        tags: tuple[str, ...] = (),
    ):
        self._cls = cls

        if cls.__init__ is object.__init__:
            self._dependencies = {}
        else:
            self._dependencies = _signature_dependencies(
                cls.__init__, f"{cls.__qualname__}.__init__", strict=True
            )

        self._meta = ProviderMeta(
            name=cls.__name__,
            token=token_to_key(cls),
            scope=scope,
            tags=tags,
            module=cls.__module__,
            qualname=cls.__qualname__,
        )

    @property
    def meta(self) -> ProviderMeta:
        return self._meta

    @property
    def cls(self) -> Type:
        return self._cls

    def instantiate(self, ctx: ResolveCtx) -> Any:
        """Instantiate class by resolving dependencies."""
        resolved_deps = {}
        for dep_name, dep_info in self._dependencies.items():
            resolved = ctx.resolve(dep_info["token"], optional=dep_info["optional"])
            # Let the constructor default apply when an optional dependency is absent
            if resolved is None and dep_info["optional"]:
                continue
            resolved_deps[dep_name] = resolved

        return self._cls(**resolved_deps)

    def __repr__(self) -> str:
        return f"ClassProvider({self._cls.__qualname__}, scope={self._meta.scope!r})"


class FactoryProvider:
    """
    Provider that calls a factory function to produce instances.

    Annotated factory parameters are resolved from the container;
    unannotated ones are left to their defaults.
    """

    __slots__ = ("_meta", "_factory", "_dependencies")

    def __init__(
        self,
        factory: Callable,
        scope: str = "app",
        tags: tuple[str, ...] = (),
        name: Optional[str] = None,
        token: Any = None,
    ):
        self._factory = factory
        self._dependencies = _signature_dependencies(
            factory, getattr(factory, "__qualname__", repr(factory)), strict=False
        )

        module = getattr(factory, "__module__", "")
        qualname = getattr(factory, "__qualname__", repr(factory))

        if token is not None:
            token_str = token_to_key(token)
        else:
            token_str = name or f"{module}.{qualname}"

        self._meta = ProviderMeta(
            name=name or getattr(factory, "__name__", qualname),
            token=token_str,
            scope=scope,
            tags=tags,
            module=module,
            qualname=qualname,
        )

    @property
    def meta(self) -> ProviderMeta:
        return self._meta

    def instantiate(self, ctx: ResolveCtx) -> Any:
        """Call factory with resolved dependencies."""
        resolved_deps = {}
        for dep_name, dep_info in self._dependencies.items():
            resolved = ctx.resolve(dep_info["token"], optional=dep_info["optional"])
            if resolved is None and dep_info["optional"]:
                continue
            resolved_deps[dep_name] = resolved

        return self._factory(**resolved_deps)


class ValueProvider:
    """Provider that returns a pre-bound constant value."""

    __slots__ = ("_meta", "_value")

    def __init__(
        self,
        value: Any,
        token: Any,
        name: Optional[str] = None,
        scope: str = "singleton",
        tags: tuple[str, ...] = (),
    ):
        self._value = value
        self._meta = ProviderMeta(
            name=name or "value",
            token=token_to_key(token),
            scope=scope,
            tags=tags,
        )

    @property
    def meta(self) -> ProviderMeta:
        return self._meta

    def instantiate(self, ctx: ResolveCtx) -> Any:
        """Return pre-bound value."""
        return self._value

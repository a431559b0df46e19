from __future__ import annotations

import inspect
import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import DependencyResolutionError, NotInstantiableError, RecursiveDependencyError
from ._interface import ContainerInterface
from ._introspection import Introspector


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterator, Sequence

    from ._introspection import ParameterDescriptor

    T = TypeVar("T")


class DependencyStack:
    """Identifiers currently being resolved, outermost first."""

    def __init__(self) -> None:
        self._identifiers: list[Hashable] = []

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)

    def __repr__(self) -> str:
        return f"DependencyStack({self._identifiers!r})"

    @contextmanager
    def entered(self, identifier: Hashable) -> Iterator[None]:
        """Hold ``identifier`` on the stack for the duration of the block.

        Raise RecursiveDependencyError if it is already there.
        """
        if identifier in self._identifiers:
            raise RecursiveDependencyError(identifier, [*self._identifiers, identifier])

        self._identifiers.append(identifier)
        try:
            yield
        finally:
            self._identifiers.pop()


class Container(ContainerInterface):
    """Minimal DI container.

    - bind classes, factories or pre-built instances to identifiers
    - alias identifiers
    - resolve with constructor injection, falling back to the identifier as a class
    - invoke callables with their parameters injected.
    """

    def __init__(self, introspector: Introspector | None = None) -> None:
        self._bindings: dict[Hashable, Callable[..., Any]] = {}
        self._instances: dict[Hashable, Any] = {}
        self._aliases: dict[Hashable, Hashable] = {}
        self._stack = DependencyStack()
        self._introspector = introspector or Introspector()
        self._lock = threading.RLock()

    def bind_class(self, identifier: Hashable, class_name: type | str) -> None:
        """Bind a class, or the dotted path of one, to ``identifier``.

        Example:
          container.bind_class(Repository, SqlRepository)
          container.bind_class("cache", "myapp.cache.RedisCache")

        The class is looked up when the identifier is resolved, not here.
        """

        def factory(container: Container, *args: Any, **kwargs: Any) -> Any:
            return container.resolve(class_name, *args, **kwargs)

        with self._lock:
            self._bindings[identifier] = factory

    def bind_instance(self, identifier: Hashable, instance: object) -> None:
        """Bind a pre-built value (always singleton)."""
        with self._lock:
            self._instances[identifier] = instance

    def bind_factory(self, identifier: Hashable, factory: Callable[..., Any]) -> None:
        """Bind a factory called as ``factory(container, *args, **kwargs)`` on every resolve."""
        with self._lock:
            self._bindings[identifier] = factory

    def alias(self, identifier: Hashable, alias: Hashable) -> None:
        with self._lock:
            while identifier in self._aliases:
                identifier = self._aliases[identifier]

            if alias == identifier:
                return

            # Keep every alias pointing straight at its origin.
            for existing, target in self._aliases.items():
                if target == alias:
                    self._aliases[existing] = identifier

            self._aliases[alias] = identifier
            logger.debug("Aliased %r to %r", alias, identifier)

    def has(self, identifier: Hashable) -> bool:
        """Whether ``identifier`` has a bound instance or binding, after following aliases."""
        with self._lock:
            resolved = self._aliases.get(identifier, identifier)
            return resolved in self._instances or resolved in self._bindings

    @overload
    def resolve(self, identifier: type[T], *args: Any, **kwargs: Any) -> T: ...

    @overload
    def resolve(self, identifier: str, *args: Any, **kwargs: Any) -> Any: ...

    def resolve(self, identifier: Any, *args: Any, **kwargs: Any) -> Any:
        """Resolve the identifier to a value.

        - a bound instance is returned as is, ignoring any arguments.
        - a binding is called with the container and the arguments.
        - otherwise the identifier is instantiated as a class, auto-wiring
          constructor parameters by type hints.
        """
        with self._lock:
            resolved = self._aliases.get(identifier, identifier)

            with self._stack.entered(resolved):
                if resolved in self._instances:
                    logger.debug("Resolved %r from bound instance", resolved)
                    return self._instances[resolved]

                if resolved in self._bindings:
                    logger.debug("Resolving %r through its binding", resolved)
                    return self._bindings[resolved](self, *args, **kwargs)

                return self._create_instance(resolved, *args, **kwargs)

    def invoke(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``func``, resolving whichever parameters the arguments leave unmet.

        Example:
          container.invoke(handler, request)  # request first, the rest injected
        """
        with self._lock:
            parameters = self._introspector.inspect_callable(func)

            if parameters is None:
                return func(*args, **kwargs)

            if not parameters:
                return func()

            call_args, call_kwargs = self._resolve_arguments(parameters, args, kwargs)
            return func(*call_args, **call_kwargs)

    def _create_instance(self, identifier: Any, *args: Any, **kwargs: Any) -> Any:
        metadata = self._introspector.inspect_type(identifier)

        if not metadata.instantiable:
            raise NotInstantiableError(identifier)

        cls = metadata.cls
        if not metadata.constructor:
            logger.debug("Instantiating %s without a constructor", cls.__qualname__)
            return cls()

        if metadata.parameters is None:
            return cls(*args, **kwargs)

        logger.debug("Auto-wiring %s", cls.__qualname__)
        call_args, call_kwargs = self._resolve_arguments(metadata.parameters, args, kwargs)
        return cls(*call_args, **call_kwargs)

    def _resolve_arguments(
        self,
        parameters: Sequence[ParameterDescriptor],
        args: Sequence[Any],
        kwargs: dict[str, Any],
    ) -> tuple[list[Any], dict[str, Any]]:
        """Fill every non-variadic parameter from the arguments, its default or the container.

        A complete positional argument list bypasses auto-wiring entirely.
        """
        fixed = [p for p in parameters if not p.variadic]
        if not kwargs and len(fixed) == len(args) and all(p.positional for p in fixed):
            return list(args), {}

        call_args: list[Any] = []
        call_kwargs = dict(kwargs)

        for p in fixed:
            if not p.positional:
                if p.name not in call_kwargs:
                    call_kwargs[p.name] = self._resolve_parameter(p)
                continue

            if p.position < len(args):
                call_args.append(args[p.position])
            elif p.name in call_kwargs and p.kind is not inspect.Parameter.POSITIONAL_ONLY:
                call_args.append(call_kwargs.pop(p.name))
            else:
                call_args.append(self._resolve_parameter(p))

        # Surplus positionals go to *args, or make the call fail.
        call_args.extend(args[len(call_args) :])
        return call_args, call_kwargs

    def _resolve_parameter(self, p: ParameterDescriptor) -> Any:
        if p.has_default:
            return p.default

        if not p.autowirable:
            raise DependencyResolutionError(p)

        return self.resolve(p.annotation)

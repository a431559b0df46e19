from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable


class ContainerInterface(ABC):
    """A dependency injection container."""

    @abstractmethod
    def bind_class(self, identifier: Hashable, class_name: type | str) -> None:
        """Bind a class to ``identifier`` so an instance of it can later be resolved with the identifier.

        ``class_name`` is either the class itself or its dotted import path.
        """

    @abstractmethod
    def bind_instance(self, identifier: Hashable, instance: object) -> None:
        """Bind an arbitrary value to ``identifier``."""

    @abstractmethod
    def bind_factory(self, identifier: Hashable, factory: Callable[..., Any]) -> None:
        """Bind a factory to ``identifier``.

        The factory is called with the container followed by the arguments
        given to ``resolve``, every time the identifier is resolved.
        """

    @abstractmethod
    def resolve(self, identifier: Any, *args: Any, **kwargs: Any) -> Any:
        """Resolve the value matching ``identifier``.

        Extra arguments are passed on to the construction of the value.
        """

    @abstractmethod
    def invoke(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``func``, resolving any parameters not given explicitly."""

    @abstractmethod
    def alias(self, identifier: Hashable, alias: Hashable) -> None:
        """Make ``alias`` resolve to the same value as ``identifier``."""

    @abstractmethod
    def has(self, identifier: Hashable) -> bool:
        """Whether ``identifier``, or what it is an alias of, has a bound instance or binding."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence

    from ._introspection import ParameterDescriptor


class ContainerError(RuntimeError):
    """Base class for every error raised by the container."""


class ClassNotFoundError(ContainerError):
    """Raised when an identifier names a class that cannot be loaded."""

    def __init__(self, class_name: Any) -> None:
        self.class_name = class_name
        super().__init__(f"Class cannot be loaded: {_describe(class_name)}")


class NotInstantiableError(ContainerError):
    """Raised when an identifier names an abstract class or a protocol."""

    def __init__(self, class_name: Any) -> None:
        self.class_name = class_name
        super().__init__(f"Cannot instantiate: {_describe(class_name)}")


class DependencyResolutionError(ContainerError):
    """Raised when a required parameter has no value, no default and no usable type."""

    def __init__(self, parameter: ParameterDescriptor) -> None:
        self.parameter = parameter
        super().__init__(f"Unresolved dependency: {parameter.name} in {parameter.owner}")


class RecursiveDependencyError(ContainerError):
    """Raised when an identifier is requested while it is still being resolved."""

    def __init__(self, identifier: Hashable, cycle: Sequence[Hashable] = ()) -> None:
        self.identifier = identifier
        self.cycle = tuple(cycle)
        msg = f"Identifier is being resolved recursively: {_describe(identifier)}"
        if self.cycle:
            msg += f" ({' -> '.join(_describe(i) for i in self.cycle)})"
        super().__init__(msg)


def _describe(identifier: Any) -> str:
    if isinstance(identifier, type):
        return f"{identifier.__module__}.{identifier.__qualname__}"
    return str(identifier)

"""Minimal dependency injection container.

This package provides a lightweight dependency injection container for Python,
mapping identifiers (strings or classes) to classes, factories and pre-built
instances, and constructing object graphs by auto-wiring constructor and
callable parameters from their type hints.

Exports:
- `Container`: Main DI container supporting bindings, aliases, resolution and invocation.
- `ContainerInterface`: Abstract interface implemented by `Container`.
- `Introspector`: Reads constructor and callable metadata; replaceable per container.
- `ContainerError` and its subclasses: `ClassNotFoundError`, `NotInstantiableError`,
  `DependencyResolutionError`, `RecursiveDependencyError`.
"""

from ._container import Container, DependencyStack
from ._errors import (
    ClassNotFoundError,
    ContainerError,
    DependencyResolutionError,
    NotInstantiableError,
    RecursiveDependencyError,
)
from ._interface import ContainerInterface
from ._introspection import Introspector, ParameterDescriptor, TypeMetadata


__all__ = [
    "ClassNotFoundError",
    "Container",
    "ContainerError",
    "ContainerInterface",
    "DependencyResolutionError",
    "DependencyStack",
    "Introspector",
    "NotInstantiableError",
    "ParameterDescriptor",
    "RecursiveDependencyError",
    "TypeMetadata",
]

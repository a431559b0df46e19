from __future__ import annotations

import builtins
import functools
import importlib
import inspect
import logging
import re
import types
import typing
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Protocol,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ._errors import ClassNotFoundError


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

# Annotations from these modules are never autowired.
_BUILTIN_MODULES = frozenset({"builtins", "collections.abc", "typing", "types"})
_BUILTIN_NAMES = frozenset(name for name, value in vars(builtins).items() if inspect.isclass(value))
_TOKEN_SPLIT = re.compile(r"[\s|\[\],]+")
# Leading names of string annotations that are never autowired.
_BUILTIN_HEADS = _BUILTIN_NAMES | {m.partition(".")[0] for m in _BUILTIN_MODULES} | frozenset(typing.__all__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterDescriptor:
    """Metadata about one formal parameter of a constructor or callable.

    Attributes:
        name: Parameter name.
        position: Index in the signature.
        kind: The ``inspect.Parameter`` kind.
        owner: Qualified name of the declaring function, used in error messages.
        annotation: Declared type with ``Optional``/``Annotated`` unwrapped, or None.
        builtin: Whether the declared type is a built-in or otherwise not autowirable.
        nullable: Whether the declared type admits None.
        has_default: Whether a default value is declared.
        default: The default value, if any.
    """

    name: str
    position: int
    kind: inspect._ParameterKind
    owner: str
    annotation: Any = None
    builtin: bool = False
    nullable: bool = False
    has_default: bool = False
    default: Any = None

    @property
    def positional(self) -> bool:
        return self.kind in _POSITIONAL

    @property
    def variadic(self) -> bool:
        return self.kind in _VARIADIC

    @property
    def autowirable(self) -> bool:
        return self.annotation is not None and not self.builtin


@dataclass(frozen=True)
class TypeMetadata:
    """What the container needs to know to construct ``cls``.

    ``parameters`` is None when the runtime exposes no signature for the
    constructor (some C-implemented types).
    """

    cls: type
    instantiable: bool
    constructor: bool
    parameters: tuple[ParameterDescriptor, ...] | None


class Introspector:
    """Reads type and callable metadata with ``inspect`` and ``typing``.

    Type names are dotted import paths such as ``"package.module.ClassName"``.
    """

    def load_type(self, name: str) -> type:
        """Import the class named by a dotted path.

        Raise ClassNotFoundError when no module on the path can be imported,
        an attribute is missing, or the target is not a class.
        """
        parts = name.split(".")
        if len(parts) < 2 or not all(parts):  # noqa: PLR2004
            raise ClassNotFoundError(name)

        import_error: ImportError | None = None
        for split in range(len(parts) - 1, 0, -1):
            try:
                target: Any = importlib.import_module(".".join(parts[:split]))
            except ImportError as exc:
                import_error = exc
                continue

            try:
                for attr in parts[split:]:
                    target = getattr(target, attr)
            except AttributeError as exc:
                raise ClassNotFoundError(name) from exc

            if not inspect.isclass(target):
                raise ClassNotFoundError(name)
            return target

        raise ClassNotFoundError(name) from import_error

    def inspect_type(self, identifier: Any) -> TypeMetadata:
        if isinstance(identifier, str):
            cls = self.load_type(identifier)
        elif inspect.isclass(identifier):
            cls = identifier
        else:
            raise ClassNotFoundError(identifier)

        if not self.is_instantiable(cls):
            return TypeMetadata(cls, instantiable=False, constructor=False, parameters=())

        if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
            return TypeMetadata(cls, instantiable=True, constructor=False, parameters=())

        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            logger.debug("No signature available for %s", cls.__qualname__)
            return TypeMetadata(cls, instantiable=True, constructor=True, parameters=None)

        if cls.__init__ is not object.__init__:
            constructor, owner = cls.__init__, f"{cls.__qualname__}.__init__"
        else:
            constructor, owner = cls.__new__, f"{cls.__qualname__}.__new__"

        return TypeMetadata(
            cls,
            instantiable=True,
            constructor=True,
            parameters=self._describe(signature, constructor, owner),
        )

    def inspect_callable(self, func: Callable[..., Any]) -> tuple[ParameterDescriptor, ...] | None:
        """Describe the parameters of ``func``, or return None when it has no signature."""
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            logger.debug("No signature available for %r", func)
            return None

        target: Any = func
        if isinstance(func, functools.partial):
            target = func.func
        elif inspect.isclass(func):
            target = func.__init__
        elif not (inspect.isfunction(func) or inspect.ismethod(func)) and hasattr(type(func), "__call__"):
            target = type(func).__call__

        owner = getattr(func, "__qualname__", None) or getattr(target, "__qualname__", repr(func))
        return self._describe(signature, target, owner)

    def is_instantiable(self, cls: type) -> bool:
        return not (inspect.isabstract(cls) or _is_protocol(cls))

    def _describe(
        self,
        signature: inspect.Signature,
        func: Any,
        owner: str,
    ) -> tuple[ParameterDescriptor, ...]:
        hints = _get_type_hints(func, owner)

        descriptors = []
        for position, (name, p) in enumerate(signature.parameters.items()):
            annotation, builtin, nullable = _classify(hints.get(name, p.annotation))
            has_default = p.default is not inspect.Parameter.empty
            descriptors.append(
                ParameterDescriptor(
                    name=name,
                    position=position,
                    kind=p.kind,
                    owner=owner,
                    annotation=annotation,
                    builtin=builtin,
                    nullable=nullable,
                    has_default=has_default,
                    default=p.default if has_default else None,
                )
            )
        return tuple(descriptors)


def _classify(annotation: Any) -> tuple[Any, bool, bool]:
    """Split an annotation into (declared type, builtin, nullable)."""
    if annotation is inspect.Parameter.empty or annotation is None:
        return None, False, False

    # Unevaluated forward reference: a plain dotted name is used as the identifier.
    if isinstance(annotation, str):
        return annotation, not _is_plain_name(annotation), "None" in _TOKEN_SPLIT.split(annotation)

    nullable = False
    if get_origin(annotation) in (Union, types.UnionType):
        args = get_args(annotation)
        members = [a for a in args if a is not type(None)]
        nullable = len(members) < len(args)
        if len(members) != 1:
            return annotation, True, nullable
        annotation = members[0]

    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    origin = get_origin(annotation)
    if inspect.isclass(origin):
        annotation = origin

    if not inspect.isclass(annotation):
        return annotation, True, nullable

    return annotation, annotation.__module__ in _BUILTIN_MODULES, nullable


def _is_plain_name(annotation: str) -> bool:
    parts = annotation.split(".")
    if not all(part.isidentifier() for part in parts):
        return False
    return parts[0] not in _BUILTIN_HEADS


def _get_type_hints(func: Any, owner: str) -> dict[str, Any]:
    try:
        hints = get_type_hints(func)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, owner)
        hints = _get_type_hints_one_by_one(func)

    return hints


def _get_type_hints_one_by_one(func: Any) -> dict[str, Any]:
    """Evaluate each annotation on its own; the ones that fail stay strings."""
    globalns = getattr(func, "__globals__", {})
    hints = {}
    for name, annotation in (getattr(func, "__annotations__", None) or {}).items():
        def holder() -> None: ...

        holder.__annotations__ = {name: annotation}
        try:
            hints[name] = get_type_hints(holder, globalns=globalns)[name]
        except (NameError, TypeError, SyntaxError):
            hints[name] = annotation

    return hints


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is itself a typing.Protocol class, not an implementation of one."""
        return inspect.isclass(tp) and tp is not Protocol and bool(getattr(tp, "_is_protocol", False))

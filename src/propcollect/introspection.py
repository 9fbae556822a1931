"""
Type metadata capability for the reflective walk.

The collector never touches Python's introspection API directly. It walks
objects satisfying the TypeInfo protocol:

    name            Class name
    type            The runtime class (binding compares instances against it)
    declaring_type  TypeInfo of the lexically enclosing class, or None
    nested_types    TypeInfo of every class declared directly inside
    own_fields      FieldInfo of every field the class exposes

ClassInfo implements the protocol for ordinary Python classes. Anything
else exposing the same attributes (e.g. a test double) works as well.
"""

import dataclasses
import inspect
import logging
import sys
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, ClassVar, List, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

_LOCALS_MARKER = "<locals>"


@dataclass(frozen=True)
class FieldInfo:
    """A field as reported by a TypeInfo."""
    name: str
    value_type: Any
    reader: Callable[[Any], Any]


class TypeInfo(Protocol):
    name: str
    type: type

    @property
    def declaring_type(self) -> Optional["TypeInfo"]: ...

    @property
    def nested_types(self) -> Sequence["TypeInfo"]: ...

    @property
    def own_fields(self) -> Sequence[FieldInfo]: ...


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or getattr(annotation, "__origin__", None) is ClassVar


def _class_annotations(klass: type) -> dict:
    # inspect.get_annotations only returns what klass itself declares
    return inspect.get_annotations(klass)


def resolve_declaring_class(cls: type) -> Optional[type]:
    """
    Find the class that lexically encloses ``cls``, using its __qualname__.

    Classes defined inside a function body cannot be reached from their
    module, so they are treated as top-level.

    Returns:
        The enclosing class, or None for a top-level class
    """
    parts = cls.__qualname__.split(".")
    if _LOCALS_MARKER in parts:
        logger.debug("%s is defined in a function; enclosing chain truncated", cls.__qualname__)
        return None
    if len(parts) < 2:
        return None

    module = sys.modules.get(cls.__module__)
    if module is None:
        return None

    target: Any = module
    for part in parts[:-1]:
        target = getattr(target, part, None)
        if target is None:
            logger.debug("Cannot resolve %s in module %s", part, cls.__module__)
            return None
    return target if inspect.isclass(target) else None


def declared_fields(cls: type) -> List[FieldInfo]:
    """
    List the public fields of a class.

    Sources, in order:
        - dataclass fields (if ``cls`` is a dataclass)
        - otherwise annotated class attributes, base classes first
        - public ``property`` objects, base classes first

    Names starting with an underscore and ClassVar annotations are skipped.
    Inherited fields are included, like any attribute readable on an instance.
    """
    found: List[FieldInfo] = []
    seen = set()

    def add(name: str, value_type: Any) -> None:
        if name.startswith("_") or name in seen:
            return
        seen.add(name)
        found.append(FieldInfo(name=name, value_type=value_type, reader=attrgetter(name)))

    hierarchy = [klass for klass in reversed(cls.__mro__) if klass is not object]

    if dataclasses.is_dataclass(cls):
        for dc_field in dataclasses.fields(cls):
            add(dc_field.name, dc_field.type)
    else:
        for klass in hierarchy:
            for name, annotation in _class_annotations(klass).items():
                if not _is_class_var(annotation):
                    add(name, annotation)

    for klass in hierarchy:
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                returns = None
                if attr.fget is not None:
                    returns = getattr(attr.fget, "__annotations__", {}).get("return")
                add(name, returns)

    return found


def nested_classes(cls: type) -> List[type]:
    """
    Classes declared directly inside ``cls``, in declaration order.

    Class attributes that merely reference a class defined elsewhere
    are not nested classes and are ignored.
    """
    prefix = cls.__qualname__ + "."
    nested = []
    for name, attr in vars(cls).items():
        if inspect.isclass(attr) and attr.__qualname__ == prefix + name:
            nested.append(attr)
    return nested


class ClassInfo:
    """TypeInfo for an ordinary Python class."""

    def __init__(self, cls: type, declaring_type: Optional["ClassInfo"] = None):
        if not inspect.isclass(cls):
            raise TypeError(f"Expected a class, got {cls!r}")
        self.type = cls
        self.name = cls.__name__
        self._declaring_type = declaring_type

    @property
    def declaring_type(self) -> Optional["ClassInfo"]:
        if self._declaring_type is None:
            outer = resolve_declaring_class(self.type)
            if outer is not None:
                self._declaring_type = ClassInfo(outer)
        return self._declaring_type

    @property
    def nested_types(self) -> List["ClassInfo"]:
        return [ClassInfo(nested, declaring_type=self) for nested in nested_classes(self.type)]

    @property
    def own_fields(self) -> List[FieldInfo]:
        return declared_fields(self.type)

    def __repr__(self) -> str:
        return f"ClassInfo({self.type.__qualname__})"


def class_info(cls: Any) -> TypeInfo:
    """Wrap a class in ClassInfo; TypeInfo objects are passed through unchanged."""
    if inspect.isclass(cls):
        return ClassInfo(cls)
    if not hasattr(cls, "own_fields"):
        raise TypeError(f"Expected a class or TypeInfo, got {cls!r}")
    return cls


__all__ = [
    "FieldInfo",
    "TypeInfo",
    "ClassInfo",
    "class_info",
    "declared_fields",
    "nested_classes",
    "resolve_declaring_class",
]

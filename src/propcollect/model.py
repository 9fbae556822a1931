"""
Core Property Model Objects

Defines the data structures produced by the collectors:
    - Field (one discovered field of a class)
    - PropertyMapping (canonical path -> Field)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about how fields were discovered (reflection or parsing)
        - Never own the instances they read from
        - Are mutated only to attach a bound object or a description
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional


class TypeMismatchError(TypeError):
    """Raised when binding an instance whose type differs from the field's declared type."""
    pass


class UnboundFieldError(AttributeError):
    """Raised when reading the value of a field that has no bound object."""
    pass


class PropertyNotFoundError(KeyError):
    """Raised when a canonical path is not present in a PropertyMapping."""

    def __str__(self):
        # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


@dataclass(eq=False)
class Field:
    """
    One discovered field of a class.

    Properties:
        name:
            Bare declared name (e.g. "NumberSeats")

        container_name:
            Name of the immediately enclosing class (e.g. "Interior")

        canonical_path:
            Dot-delimited route from the outermost class
            Example: "TestCar.Car.Interior.NumberSeats"
            Unique key inside a PropertyMapping by contract only

        declared_type:
            The class the field was discovered on.
            An instance may only be bound if its type is exactly this class.

        value_type:
            The field's annotation, if any (a string under postponed evaluation)

        reader:
            Callable reading the field from an instance of declared_type

        bound_object:
            Externally owned instance the value is read from (None until bound)

        description:
            Documentation summary (None until matched by the description collector)

    INVARIANT:
        bound_object is None or type(bound_object) is declared_type
    """

    name: str
    container_name: str
    canonical_path: str
    declared_type: type
    reader: Callable[[Any], Any] = field(repr=False)
    value_type: Any = None
    bound_object: Any = field(default=None, repr=False)
    description: Optional[str] = None

    def bind(self, obj: Any) -> None:
        """
        Attach a live instance to read values from.

        Raises:
            TypeMismatchError: If type(obj) is not declared_type
        """
        if type(obj) is not self.declared_type:
            raise TypeMismatchError(
                f"Cannot bind {type(obj).__qualname__} instance to field "
                f"'{self.canonical_path}' declared on {self.declared_type.__qualname__}"
            )
        self.bound_object = obj

    @property
    def is_bound(self) -> bool:
        return self.bound_object is not None

    @property
    def accessor(self) -> Optional[Callable[[], Any]]:
        """Zero-argument callable reading the current value, or None when unbound."""
        if self.bound_object is None:
            return None
        return partial(self.reader, self.bound_object)

    @property
    def value(self) -> Any:
        """
        Current value read through the bound object.

        The value is read on every access, so changes to the bound
        object are visible immediately.

        Raises:
            UnboundFieldError: If no object is bound
        """
        if self.bound_object is None:
            raise UnboundFieldError(f"Field '{self.canonical_path}' has no bound object")
        return self.reader(self.bound_object)

    @property
    def declared_type_name(self) -> str:
        return self.declared_type.__qualname__


class PropertyMapping(dict):
    """
    Mapping from canonical path to Field.

    Iteration follows insertion order. Writing an existing path replaces
    the Field but keeps the path's original position.

    Lookups of absent paths raise PropertyNotFoundError.
    """

    def __missing__(self, key):
        raise PropertyNotFoundError(f"Key not found: '{key}'")

    def add(self, prop: Field) -> None:
        """Insert a Field under its canonical path, replacing any previous entry."""
        self[prop.canonical_path] = prop

    def merge(self, other: "PropertyMapping") -> "PropertyMapping":
        """
        Merge another mapping into this one.

        Entries sharing a canonical path are overwritten by the entry
        from ``other``. This is intended behaviour, not a collision error.

        Returns:
            self
        """
        self.update(other)
        return self

    def container_names(self) -> list:
        """Distinct container names, in first-seen order."""
        seen = []
        for prop in self.values():
            if prop.container_name not in seen:
                seen.append(prop.container_name)
        return seen


__all__ = [
    "Field",
    "PropertyMapping",
    "TypeMismatchError",
    "UnboundFieldError",
    "PropertyNotFoundError",
]

"""
Reflective property collector (class metadata -> PropertyMapping).

Walks a class's fields, and optionally its nested classes, naming every
field by its canonical path. Fields can be bound to a live instance so
their values can be read through the mapping.

Usage:
    >>> mapping = PropertyMapping()
    >>> collect_type(TestCar, recurse_nested=True, mapping=mapping)
    >>> collect_object(interior, mapping=mapping)
    >>> mapping["TestCar.Car.Interior.NumberSeats"].value
    5

MERGE POLICY:
    Every call collects into a fresh sub-mapping which is then merged into
    the caller's mapping. Entries sharing a canonical path are overwritten
    by the newer call. There is no state kept between calls.
"""

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from propcollect.descriptions import collect_descriptions
from propcollect.introspection import TypeInfo, class_info
from propcollect.model import Field, PropertyMapping, TypeMismatchError
from propcollect.paths import canonical_path, enclosing_chain

logger = logging.getLogger(__name__)


class PrefixMode(Enum):
    """How canonical paths begin."""
    ENCLOSING = "enclosing"  # TestCar.Car.Interior.NumberSeats
    NONE = "none"            # Interior.NumberSeats


def collect_fields(
    type_info: TypeInfo,
    recurse_nested: bool = False,
    prefix: Iterable[str] = (),
    mapping: Optional[PropertyMapping] = None,
) -> PropertyMapping:
    """
    Collect the fields of one TypeInfo (and its nested types) into a mapping.

    Args:
        type_info: Class metadata to walk
        recurse_nested: Also walk every nested type, recursively
        prefix: Names preceding type_info's own name in every path
        mapping: Mapping to add to (a new one is created if None)

    Returns:
        The mapping, with one unbound Field per discovered field
    """
    if mapping is None:
        mapping = PropertyMapping()

    path_to_type: List[str] = list(prefix) + [type_info.name]

    for info in type_info.own_fields:
        mapping.add(Field(
            name=info.name,
            container_name=type_info.name,
            canonical_path=canonical_path(path_to_type, info.name),
            declared_type=type_info.type,
            reader=info.reader,
            value_type=info.value_type,
        ))

    if recurse_nested:
        for nested in type_info.nested_types:
            collect_fields(nested, recurse_nested, path_to_type, mapping)

    return mapping


def collect_type(
    cls: Any,
    recurse_nested: bool = False,
    *,
    bound_object: Any = None,
    description_source: Optional[str] = None,
    mapping: Optional[PropertyMapping] = None,
    prefix_mode: Union[PrefixMode, str] = PrefixMode.ENCLOSING,
) -> PropertyMapping:
    """
    Collect all fields of a class into a PropertyMapping.

    Args:
        cls: A class (or any TypeInfo)
        recurse_nested: Also collect the fields of nested classes
        bound_object: Instance of exactly ``cls`` to bind the top class's
            fields to. Fields of nested classes are never bound here;
            collect those with their own instance via collect_object().
        description_source: Path to the .py file declaring ``cls``; its
            documentation comments become field descriptions
        mapping: Caller-owned mapping to merge the result into
        prefix_mode: ENCLOSING prefixes every path with all lexically
            enclosing classes, NONE starts paths at ``cls``

    Returns:
        ``mapping`` if given, otherwise the newly collected mapping

    Raises:
        TypeMismatchError: If bound_object is not an instance of exactly cls.
            Raised before anything is merged.
        DescriptionParseError: If description_source cannot be parsed.
            The collected fields are already merged at that point.
    """
    prefix_mode = PrefixMode(prefix_mode)
    info = class_info(cls)

    if bound_object is not None and type(bound_object) is not info.type:
        raise TypeMismatchError(
            f"The type of the object ({type(bound_object).__qualname__}) and the "
            f"type of the properties ({info.type.__qualname__}) don't match"
        )

    prefix = enclosing_chain(info) if prefix_mode is PrefixMode.ENCLOSING else []
    collected = collect_fields(info, recurse_nested, prefix)
    logger.debug("Collected %d field(s) from %s", len(collected), info.name)

    if bound_object is not None:
        for prop in collected.values():
            if prop.declared_type is info.type:
                prop.bind(bound_object)

    if mapping is None:
        mapping = collected
    else:
        mapping.merge(collected)

    if description_source is not None:
        collect_descriptions(
            description_source,
            collected,
            root_class=info.name,
            include_enclosing=prefix_mode is PrefixMode.ENCLOSING,
        )

    return mapping


def collect_object(
    obj: Any,
    *,
    description_source: Optional[str] = None,
    mapping: Optional[PropertyMapping] = None,
    prefix_mode: Union[PrefixMode, str] = PrefixMode.ENCLOSING,
) -> PropertyMapping:
    """
    Collect the fields of ``type(obj)`` and bind them to ``obj``.

    Nested classes are not walked. To collect several objects into one
    mapping, pass the same ``mapping`` to each call.
    """
    return collect_type(
        type(obj),
        recurse_nested=False,
        bound_object=obj,
        description_source=description_source,
        mapping=mapping,
        prefix_mode=prefix_mode,
    )


__all__ = [
    "PrefixMode",
    "collect_fields",
    "collect_type",
    "collect_object",
]

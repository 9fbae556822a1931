"""
Canonical path construction.

A canonical path names how to reach a field from its outermost enclosing
class, e.g. ``TestCar.Car.Interior.NumberSeats``.

Both traversals build their keys here:
    - The reflective walk (collector.py) derives ancestors from class metadata
    - The syntactic walk (descriptions.py) derives them from a parse tree

ARCHITECTURAL RULE:
    Both walks MUST call canonical_path() to produce keys.
    If they format paths independently, descriptions silently stop matching.
"""

from typing import Iterable, List, Optional, Tuple

PATH_SEPARATOR = "."

NestingStack = Tuple[Optional[str], ...]


def canonical_path(ancestors: Iterable[Optional[str]], field_name: str) -> str:
    """
    Join ancestor names and a field name into a canonical path.

    Args:
        ancestors: Enclosing class names, outermost first. ``None`` entries
            (a root class whose parent is not a class) are skipped.
        field_name: Bare field name

    Returns:
        ``Outer.Inner.field_name``, or ``field_name`` alone when there are
        no ancestors.
    """
    parts = [name for name in ancestors if name]
    parts.append(field_name)
    return PATH_SEPARATOR.join(parts)


def enclosing_chain(type_info) -> List[str]:
    """
    Collect the names of the classes lexically enclosing ``type_info``.

    Walks ``declaring_type`` upward until none remain. A name is recorded
    once even if the chain revisits it.

    Example:
        TestCar.Car.Interior -> ["TestCar", "Car"]

    Returns:
        Enclosing class names, outermost first (empty for a top-level class)
    """
    chain: List[str] = []
    declaring = type_info.declaring_type
    while declaring is not None and declaring.name not in chain:
        chain.append(declaring.name)
        declaring = declaring.declaring_type
    chain.reverse()
    return chain


def enter_class(stack: NestingStack, parent_name: Optional[str], class_name: str) -> NestingStack:
    """
    Advance the nesting stack on entering a class declaration.

    Transition rules:
        1. Empty stack: push ``parent_name`` first (may be None)
        2. ``parent_name`` already on the stack: drop everything after it
           (leftovers from a previously visited sibling branch)
        3. Push ``class_name``

    Nothing happens on leaving a class; the next class entered trims
    the stack instead.

    Args:
        stack: Current stack (not modified)
        parent_name: Name of the lexically enclosing class, or None
        class_name: Name of the class being entered

    Returns:
        The new stack
    """
    if not stack:
        stack = (parent_name,)
    if parent_name in stack:
        stack = stack[:stack.index(parent_name) + 1]
    return stack + (class_name,)


__all__ = [
    "PATH_SEPARATOR",
    "NestingStack",
    "canonical_path",
    "enclosing_chain",
    "enter_class",
]

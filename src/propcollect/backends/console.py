"""
Console report for a PropertyMapping.

One tab-separated row per field:
    container_name, name, canonical_path, current value, description

Unbound fields and missing descriptions are printed as empty columns.
"""

import sys
from typing import List, Optional, TextIO

from propcollect.model import Field, PropertyMapping


def display_value(prop: Field) -> str:
    """
    Current value as text.

    "" when the field has no bound object, or when the bound object never
    set the attribute (an annotation without a value).
    """
    try:
        return str(prop.value)
    except AttributeError:
        return ""


def format_row(prop: Field) -> str:
    return "\t".join([
        prop.container_name,
        prop.name,
        prop.canonical_path,
        display_value(prop),
        prop.description or "",
    ])


def format_rows(mapping: PropertyMapping) -> List[str]:
    return [format_row(prop) for prop in mapping.values()]


def print_properties(mapping: PropertyMapping, stream: Optional[TextIO] = None) -> None:
    """Print every field of the mapping, in mapping order."""
    stream = stream or sys.stdout
    for row in format_rows(mapping):
        print(row, file=stream)


__all__ = ["display_value", "format_row", "format_rows", "print_properties"]

"""
CSV export for a PropertyMapping.

Format:
    sep=,
    container_name,name,canonical_path,declared_type,value,description
    ...

The leading ``sep=,`` line makes spreadsheet applications use the comma
as separator regardless of locale. There is no header row.
"""

import csv
from io import StringIO

from propcollect.backends.console import display_value
from propcollect.model import PropertyMapping

SEPARATOR_HINT = "sep=,"


def generate_csv(mapping: PropertyMapping) -> str:
    """
    Render the mapping as CSV text.

    Args:
        mapping: Mapping to export

    Returns:
        CSV text, one line per field after the separator hint
    """
    out = StringIO()
    out.write(SEPARATOR_HINT + "\n")
    writer = csv.writer(out, lineterminator="\n")
    for prop in mapping.values():
        writer.writerow([
            prop.container_name,
            prop.name,
            prop.canonical_path,
            prop.declared_type_name,
            display_value(prop),
            prop.description or "",
        ])
    return out.getvalue()


def save_csv_file(mapping: PropertyMapping, filename: str) -> None:
    """
    Generate CSV and save to file.

    Args:
        mapping: Mapping to export
        filename: Output file path
    """
    content = generate_csv(mapping)
    with open(filename, "w", newline="", encoding="utf-8") as f:
        f.write(content)


__all__ = ["SEPARATOR_HINT", "generate_csv", "save_csv_file"]

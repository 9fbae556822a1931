"""Report backends for PropertyMapping output (console, CSV)."""

from .console import format_rows, print_properties
from .csv_export import generate_csv, save_csv_file

__all__ = ["format_rows", "print_properties", "generate_csv", "save_csv_file"]

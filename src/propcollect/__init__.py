"""
Property Collector (propcollect) Package

Collects the fields of a class, and of its nested classes, into a mapping
keyed by canonical path (e.g. "TestCar.Car.Interior.number_seats").

Two independent walks produce the same keys:
    - collector.py walks live class metadata and can bind instances
    - descriptions.py walks the declaring source and attaches documentation

ARCHITECTURAL GUARANTEE:
------------------------
Both walks build paths through paths.py only.

Reporting (console, CSV) lives in propcollect.backends and only
reads the mapping.
"""

__version__ = "0.1.0"

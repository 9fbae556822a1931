"""
Example classes for proof-of-concept collection.

TestCar nests Car, which nests Interior and Exterior. Every field carries
a ``#:`` documentation comment, so this module is also the declaration
source for its own descriptions.
"""
from dataclasses import dataclass

from propcollect.collector import PrefixMode, collect_object, collect_type
from propcollect.model import PropertyMapping


class TestCar:
    """Namespace for the example car types."""

    __test__ = False  # not a pytest test class

    #: Name of the fleet the cars belong to.
    fleet_name: str = "Test fleet"

    @dataclass
    class Car:
        #: Manufacturer of the car.
        brand: str = "Unknown"
        #: Engine power in horsepower.
        horse_power: int = 0
        #: Whether the car runs on batteries.
        is_electric: bool = False

        @property
        def label(self) -> str:
            """Brand and power, e.g. "Audi (123 hp)".

            Used as the display name in reports.
            """
            return f"{self.brand} ({self.horse_power} hp)"

        @dataclass
        class Interior:
            #: Number of seats inside the car.
            number_seats: int = 5
            #: Number of screens on the dashboard.
            number_screens: int = 1

        @dataclass
        class Exterior:
            number_doors: int = 4
            """Number of doors,
            including the boot lid."""


def build_type_mapping(prefix_mode: PrefixMode = PrefixMode.ENCLOSING) -> PropertyMapping:
    """Collect TestCar and all nested classes, with descriptions and without values."""
    return collect_type(
        TestCar,
        recurse_nested=True,
        description_source=__file__,
        prefix_mode=prefix_mode,
    )


def build_object_mapping(prefix_mode: PrefixMode = PrefixMode.ENCLOSING) -> PropertyMapping:
    """Collect one bound instance each of Car, Interior and Exterior into one mapping."""
    car = TestCar.Car("Audi", 123, True)
    interior = TestCar.Car.Interior(5, 2)
    exterior = TestCar.Car.Exterior(4)

    mapping = PropertyMapping()
    for obj in (car, interior, exterior):
        collect_object(obj, description_source=__file__, mapping=mapping, prefix_mode=prefix_mode)
    return mapping

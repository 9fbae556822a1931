#!/usr/bin/env python3
"""
Demo: Collect the example TestCar properties and print them.

1. Type walk: TestCar and all nested classes, with descriptions
2. Object walk: bound Car, Interior and Exterior instances in one mapping
3. Lookup of a value by canonical path
"""

from propcollect.backends import print_properties, save_csv_file
from propcollect.examples import build_object_mapping, build_type_mapping


def main():
    print("=" * 80)
    print("TEST ONE: TYPE PROPERTIES WITH DESCRIPTIONS")
    print("=" * 80)
    type_mapping = build_type_mapping()
    print_properties(type_mapping)
    save_csv_file(type_mapping, "properties_reflection.csv")
    print("\nSaved to: properties_reflection.csv")

    print("\n" + "=" * 80)
    print("TEST TWO: OBJECT PROPERTIES")
    print("=" * 80)
    object_mapping = build_object_mapping()
    print_properties(object_mapping)

    print("\n" + "=" * 80)
    print("GET PROPERTY VALUE VIA ITS CANONICAL NAME")
    print("=" * 80)
    number_seats = object_mapping["TestCar.Car.Interior.number_seats"]
    print(f"{number_seats.name} {number_seats.value}")


if __name__ == "__main__":
    main()

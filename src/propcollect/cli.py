"""
Command line entry point.

Examples:
    propcollect propcollect.examples:TestCar --nested --source src/propcollect/examples.py
    propcollect myapp.settings:Settings --bind --csv settings.csv --lookup Settings.timeout
    propcollect myapp.settings:Settings --config collect.yaml
"""

import argparse
import importlib
import logging
import sys
from typing import Any, List, Optional

from propcollect.backends import print_properties, save_csv_file
from propcollect.collector import PrefixMode, collect_type
from propcollect.config import CollectorConfig, ConfigError, load_config
from propcollect.descriptions import DescriptionParseError
from propcollect.model import PropertyNotFoundError

logger = logging.getLogger(__name__)


def resolve_target(target: str) -> Any:
    """
    Import a class given as ``module:QualName`` (e.g. ``pkg.mod:Outer.Inner``).

    Raises:
        ValueError: If the target is malformed or does not name a class
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Target must look like 'module:ClassName', got '{target}'")

    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"'{qualname}' not found in module '{module_name}'")
    if not isinstance(obj, type):
        raise ValueError(f"'{target}' is not a class")
    return obj


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propcollect",
        description="Collect the fields of a class by canonical path",
    )
    parser.add_argument("target", help="Class to collect, as module:QualName")
    parser.add_argument("--nested", action="store_true", default=None,
                        help="Also collect fields of nested classes")
    parser.add_argument("--bind", action="store_true",
                        help="Instantiate the class without arguments and read its values")
    parser.add_argument("--source", help="Python file declaring the class, for field descriptions")
    parser.add_argument("--prefix-mode", choices=[mode.value for mode in PrefixMode],
                        help="enclosing: start paths at the outermost class; none: at the target")
    parser.add_argument("--csv", help="Write the properties to this CSV file")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--lookup", action="append", default=[], metavar="PATH",
                        help="Print the field at this canonical path (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else CollectorConfig()
        config = config.with_overrides(
            prefix_mode=args.prefix_mode,
            recurse_nested=args.nested,
            description_source=args.source,
            csv_path=args.csv,
        )
        cls = resolve_target(args.target)
        bound_object = cls() if args.bind else None
        mapping = collect_type(
            cls,
            recurse_nested=config.recurse_nested,
            bound_object=bound_object,
            description_source=config.description_source,
            prefix_mode=config.prefix_mode,
        )
    except (ConfigError, ValueError, ImportError, OSError, TypeError, DescriptionParseError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print_properties(mapping)

    if config.csv_path:
        save_csv_file(mapping, config.csv_path)
        logger.info("Wrote %d properties to %s", len(mapping), config.csv_path)

    status = 0
    for path in args.lookup:
        try:
            prop = mapping[path]
            print(f"{prop.name} {prop.value}")
        except (PropertyNotFoundError, AttributeError) as e:
            print(f"error: {e}", file=sys.stderr)
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())

"""
Collector configuration.

Settings can come from a YAML file; command line flags override them.

YAML format:
    prefix_mode: enclosing      # or "none"
    recurse_nested: true
    description_source: src/myapp/settings.py
    csv_path: properties.csv
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from propcollect.collector import PrefixMode


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""
    pass


@dataclass(frozen=True)
class CollectorConfig:
    """
    Settings for one collection run.

    Properties:
        prefix_mode:
            PrefixMode.ENCLOSING: paths start at the outermost enclosing class
            PrefixMode.NONE: paths start at the collected class

        recurse_nested:
            Also collect fields of nested classes

        description_source:
            Path to the .py file declaring the class (optional)

        csv_path:
            Where to write the CSV report (optional)
    """

    prefix_mode: PrefixMode = PrefixMode.ENCLOSING
    recurse_nested: bool = False
    description_source: Optional[str] = None
    csv_path: Optional[str] = None

    def with_overrides(self, **overrides: Any) -> "CollectorConfig":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return config_from_dict(dict(config_to_dict(self), **changes))


def config_to_dict(config: CollectorConfig) -> Dict[str, Any]:
    return {
        "prefix_mode": config.prefix_mode.value,
        "recurse_nested": config.recurse_nested,
        "description_source": config.description_source,
        "csv_path": config.csv_path,
    }


def config_from_dict(d: Optional[Dict[str, Any]]) -> CollectorConfig:
    if d is None:
        return CollectorConfig()
    if not isinstance(d, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(d).__name__}")

    known = {f.name for f in fields(CollectorConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {unknown}")

    config = CollectorConfig()
    if "prefix_mode" in d:
        try:
            config = replace(config, prefix_mode=PrefixMode(d["prefix_mode"]))
        except ValueError:
            choices = [mode.value for mode in PrefixMode]
            raise ConfigError(f"Invalid prefix_mode {d['prefix_mode']!r}, expected one of {choices}")
    if "recurse_nested" in d:
        if not isinstance(d["recurse_nested"], bool):
            raise ConfigError(f"recurse_nested must be true or false, got {d['recurse_nested']!r}")
        config = replace(config, recurse_nested=d["recurse_nested"])
    for key in ("description_source", "csv_path"):
        if d.get(key) is not None:
            config = replace(config, **{key: str(d[key])})
    return config


def load_config_string(text: str) -> CollectorConfig:
    try:
        d = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML configuration: {e}") from e
    return config_from_dict(d)


def load_config(filepath: str) -> CollectorConfig:
    """
    Load a CollectorConfig from a YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the content is invalid
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {filepath}")
    return load_config_string(content)


def config_to_yaml(config: CollectorConfig) -> str:
    return yaml.safe_dump(config_to_dict(config), sort_keys=False)


__all__ = [
    "CollectorConfig",
    "ConfigError",
    "config_to_dict",
    "config_from_dict",
    "load_config",
    "load_config_string",
    "config_to_yaml",
]

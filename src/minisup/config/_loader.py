# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

import os
import tomllib
from pathlib import Path
from typing import Any

from minisup.exceptions import ConfigLoadError


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified.

    Merge rules:
        - Dictionaries are recursively merged
        - Scalars and arrays are replaced with the override value
        - Missing keys in override preserve base values
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in base.keys() | override.keys():
        if key not in override:
            result[key] = copy_value(base[key])
        elif key not in base:
            result[key] = copy_value(override[key])
        else:
            base_val = base[key]
            override_val = override[key]
            if isinstance(base_val, dict) and isinstance(override_val, dict):
                result[key] = deep_merge(base_val, override_val)
            else:
                result[key] = copy_value(override_val)

    return result


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Create a deep copy of a configuration value."""
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def set_nested_key(
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    dotted_key: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path, creating intermediate tables.

    Example:
        >>> data = {}
        >>> set_nested_key(data, "logging.level", "debug")
        >>> data
        {'logging': {'level': 'debug'}}
    """
    parts = dotted_key.split(".")
    current = data
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def parse_env_vars(
    prefix: str = "MINISUP_",
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a config dictionary.

    Values stay strings; type coercion happens during model validation.

    Environment variable naming:
        - Add prefix (MINISUP_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: logging.level -> MINISUP_LOGGING__LEVEL

    Args:
        prefix: Environment variable prefix.
        environ: Mapping to read instead of ``os.environ``.

    Returns:
        Dictionary of config values with nested structure.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    source = os.environ if environ is None else environ

    for key, value in source.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key:
            continue

        set_nested_key(result, config_key.replace("__", ".").lower(), value)

    return result

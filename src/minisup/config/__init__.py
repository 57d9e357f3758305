"""Configuration loading for minisup.

The supervisor reads a handful of scalar settings once at startup. They come
from (highest precedence first) command-line flags, ``MINISUP_*`` environment
variables, a TOML file, and built-in defaults.

Example:
    >>> from minisup.config import load_config
    >>> config = load_config(cli_overrides={"command": "backup.sh"})
    >>> config.type
    <RunMode.SIMPLE: 'simple'>
"""

from minisup.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

from ._defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_FILENAME
from ._load import discover_config_file, load_config
from ._loader import deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import LogFormat, LoggingConfig, LogLevel, SupervisorConfig

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILENAME",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SupervisorConfig",
    "deep_merge",
    "discover_config_file",
    "load_config",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]

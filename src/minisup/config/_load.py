"""Configuration loading entry point."""

from pathlib import Path

from minisup.exceptions import ConfigLoadError

from ._defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_FILENAME
from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import SupervisorConfig


def discover_config_file(start: Path | None = None) -> Path | None:
    """Return the default config file in a directory, if it exists.

    Args:
        start: Directory to look in. Defaults to the current directory.
    """
    candidate = (start or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(
    *,
    config_path: Path | None = None,
    include_env: bool = True,
    cli_overrides: dict[str, object] | None = None,
    environ: dict[str, str] | None = None,
) -> SupervisorConfig:
    """Load the supervisor configuration from all sources.

    Sources are merged in precedence order CLI > environment > file >
    defaults. When config_path is provided, the file must exist.

    Args:
        config_path: Explicit path to a TOML config file.
        include_env: Whether to read MINISUP_* environment variables.
        cli_overrides: Values from command-line flags.
        environ: Environment mapping used instead of ``os.environ``.

    Returns:
        The validated configuration.

    Raises:
        ConfigLoadError: If the config file is missing or cannot be parsed.
        ConfigValidationError: If a value has the wrong type.
    """
    merged = deep_merge(DEFAULT_CONFIG, {})

    if config_path is not None:
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise ConfigLoadError(msg, path=config_path)
        path: Path | None = config_path
    else:
        path = discover_config_file()

    if path is not None:
        try:
            file_values = read_toml_file(path)
        except OSError as e:
            msg = f"Failed to read config file: {e}"
            raise ConfigLoadError(msg, path=path) from e
        merged = deep_merge(merged, file_values)

    if include_env:
        merged = deep_merge(merged, parse_env_vars(environ=environ))

    if cli_overrides:
        merged = deep_merge(merged, dict(cli_overrides))

    return SupervisorConfig.from_dict(merged)

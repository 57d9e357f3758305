# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""Configuration flags shared by the CLI commands."""

from pathlib import Path
from typing import Annotated, cast

from cyclopts import Parameter

from minisup.config import SupervisorConfig, load_config
from minisup.exceptions import ConfigLoadError, ConfigValidationError

from ._shared import ExitCode, exit_with_error

ConfigPathOption = Annotated[
    Path | None, Parameter(name="--config", help="Path to a TOML config file.")
]
CommandOption = Annotated[str | None, Parameter(help="Executable to launch.")]
FolderOption = Annotated[str | None, Parameter(help="Working directory.")]
ArgumentsOption = Annotated[
    str | None,
    Parameter(help="Argument string for the command.", allow_leading_hyphen=True),
]
TypeOption = Annotated[
    str | None, Parameter(name="--type", help="Run mode: Simple or Daemon.")
]
DelayOption = Annotated[
    int | None, Parameter(help="Pacing delay between runs, in milliseconds.")
]


def build_overrides(**values: object) -> dict[str, object]:
    """Collect flag values into a config override dictionary.

    Unset flags (None) are skipped. Keys containing a double underscore are
    nested, so ``logging__level`` becomes ``{"logging": {"level": ...}}``.
    """
    overrides: dict[str, object] = {}
    for key, value in values.items():
        if value is None:
            continue
        section, _, name = key.partition("__")
        if name:
            nested = cast("dict[str, object]", overrides.setdefault(section, {}))
            nested[name] = value
        else:
            overrides[key] = value
    return overrides


def load_or_exit(
    config_path: Path | None,
    overrides: dict[str, object],
) -> SupervisorConfig:
    """Load configuration, exiting with a CLI error code on failure."""
    try:
        return load_config(config_path=config_path, cli_overrides=overrides)
    except ConfigLoadError as e:
        exit_with_error(str(e), ExitCode.LOAD_ERROR)
    except ConfigValidationError as e:
        exit_with_error(str(e), ExitCode.VALIDATION_ERROR)

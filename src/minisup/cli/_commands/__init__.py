"""minisup CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._run import app as run_app
from ._shared import ExitCode, exit_with_error, format_json, format_toml

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "config_app",
    "exit_with_error",
    "format_json",
    "format_toml",
    "register_commands",
    "run_app",
]


def register_commands(app: "App") -> None:
    """Register all subcommands on the root app."""
    app.command(run_app)
    app.command(config_app)

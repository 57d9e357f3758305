"""The command-line interface for minisup."""

from cyclopts import App
from rich.console import Console

from ._commands import register_commands

app = App(
    name="minisup",
    help="A minimal process supervisor for one command.",
    help_on_error=True,
)
register_commands(app)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create a fresh CLI app, optionally bound to specific consoles."""
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    new_app = App(
        name="minisup",
        help="A minimal process supervisor for one command.",
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )
    register_commands(new_app)
    return new_app


def main() -> None:
    """Default entrypoint for the `minisup` CLI."""
    app()


if __name__ == "__main__":
    main()

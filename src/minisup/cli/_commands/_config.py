# pyright: reportUnusedCallResult=false
"""Config command - prints the resolved configuration."""

from typing import Annotated, Literal

from cyclopts import App, Parameter

from ._options import (
    ArgumentsOption,
    CommandOption,
    ConfigPathOption,
    DelayOption,
    FolderOption,
    TypeOption,
    build_overrides,
    load_or_exit,
)
from ._shared import format_json, format_toml

OutputFormat = Literal["toml", "json"]

app = App(
    name="config",
    help="Show the configuration the supervisor would run with.",
    help_on_error=True,
)


@app.default
def show_config(  # noqa: PLR0913
    *,
    config: ConfigPathOption = None,
    command: CommandOption = None,
    folder: FolderOption = None,
    arguments: ArgumentsOption = None,
    type: TypeOption = None,  # noqa: A002
    delay: DelayOption = None,
    format: Annotated[  # noqa: A002
        OutputFormat, Parameter(help="Output format.")
    ] = "toml",
) -> None:
    """Print the merged configuration from defaults, file, env and flags."""
    overrides = build_overrides(
        command=command,
        folder=folder,
        arguments=arguments,
        type=type,
        delay=delay,
    )
    loaded = load_or_exit(config, overrides)
    data = loaded.to_dict()

    output = format_json(data) if format == "json" else format_toml(data)
    print(output.rstrip())

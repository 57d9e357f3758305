# pyright: reportUnusedCallResult=false
"""Run command - supervises the configured command until stopped."""

from functools import partial
from typing import Annotated, Literal

import anyio
from cyclopts import App, Parameter

from minisup.utils import create_supervisor_logger

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
from ._shared import ExitCode

LogLevel = Literal["debug", "info", "warning", "error"]
LogFormat = Literal["json", "text"]

app = App(
    name="run",
    help="Run the supervisor in the foreground until SIGINT or SIGTERM.",
    help_on_error=True,
)


@app.default
def run(  # noqa: PLR0913
    *,
    config: ConfigPathOption = None,
    command: CommandOption = None,
    folder: FolderOption = None,
    arguments: ArgumentsOption = None,
    type: TypeOption = None,  # noqa: A002
    delay: DelayOption = None,
    log_level: Annotated[
        LogLevel | None, Parameter(help="Log level threshold.")
    ] = None,
    log_format: Annotated[
        LogFormat | None, Parameter(help="Log output format.")
    ] = None,
    log_file: Annotated[
        str | None, Parameter(help="Log file path (stderr if unset).")
    ] = None,
) -> None:
    """Supervise the configured command.

    Settings come from flags, MINISUP_* environment variables and the config
    file, in that order of precedence. The command is restarted after every
    run, separated by the pacing delay.
    """
    from minisup.service import run_service

    overrides = build_overrides(
        command=command,
        folder=folder,
        arguments=arguments,
        type=type,
        delay=delay,
        logging__level=log_level,
        logging__format=log_format,
        logging__file=log_file,
    )
    loaded = load_or_exit(config, overrides)

    logger = create_supervisor_logger(
        level=loaded.logging.level.value,
        log_format=loaded.logging.format.value,  # type: ignore[arg-type]
        log_file=loaded.logging.file,
        max_bytes=loaded.logging.max_bytes,
        backup_count=loaded.logging.backup_count,
    )

    anyio.run(partial(run_service, loaded, logger=logger))

    if not loaded.has_command:
        raise SystemExit(ExitCode.VALIDATION_ERROR)

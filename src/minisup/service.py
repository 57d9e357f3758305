"""Service host for the supervisor.

This module wires configuration, logging and the cancellation signal around
the supervision loop. ``supervise`` is the core entry point; ``run_service``
adds the OS signal handling a long-lived background service needs.
"""

import signal
from collections.abc import Sequence
from typing import TYPE_CHECKING

import anyio

from minisup.exceptions import ConfigValidationError
from minisup.supervisor import ProcessLauncher, Supervisor

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minisup.config import SupervisorConfig

STOP_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


async def supervise(
    config: "SupervisorConfig",
    cancel: anyio.Event,
    *,
    logger: "FilteringBoundLogger",
    launcher: ProcessLauncher | None = None,
) -> None:
    """Supervise the configured command until cancel is set.

    A missing or blank command is the only fatal condition: it is logged once
    at critical level and no process is ever started.

    Args:
        config: The startup configuration.
        cancel: The service stop signal.
        logger: Logger for supervisor records.
        launcher: Process launcher. Uses real subprocesses if None.
    """
    try:
        spec = config.to_process_spec()
    except ConfigValidationError as e:
        logger.critical("command_required", key=e.key, error=str(e))
        return

    supervisor = Supervisor(
        spec,
        config.type,
        config.delay_seconds,
        launcher=launcher,
        logger=logger,
        output_limit=config.output_limit,
    )
    logger.debug(
        "supervisor_started",
        command=spec.display_command,
        mode=config.type.value,
        delay_ms=config.delay,
    )
    await supervisor.run(cancel)
    logger.debug("supervisor_stopped", command=spec.display_command)


async def run_service(
    config: "SupervisorConfig",
    *,
    logger: "FilteringBoundLogger",
    launcher: ProcessLauncher | None = None,
    stop_signals: Sequence[signal.Signals] = STOP_SIGNALS,
) -> None:
    """Run the supervisor as a service until a stop signal arrives.

    Args:
        config: The startup configuration.
        logger: Logger for supervisor records.
        launcher: Process launcher. Uses real subprocesses if None.
        stop_signals: Signals that raise the cancellation signal.
    """
    cancel = anyio.Event()

    async def handle_signals() -> None:
        with anyio.open_signal_receiver(*stop_signals) as signals:
            async for signum in signals:
                logger.info("stop_requested", signal=signal.Signals(signum).name)
                cancel.set()
                break

    async with anyio.create_task_group() as tg:
        tg.start_soon(handle_signals)
        await supervise(config, cancel, logger=logger, launcher=launcher)
        tg.cancel_scope.cancel()

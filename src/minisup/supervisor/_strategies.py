"""Run strategies for a single supervised execution.

Both strategies follow the same iteration shape: launch, wait for exit or
cancellation, log, then pace. They differ in two flags: whether output is
captured, and whether a process still running at the end of the iteration is
killed.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, ClassVar, final

import anyio

from ._models import ProcessSpec, RunMode, RunOutcome, TerminalReason
from ._output import OutputBuffer, capture_output
from ._protocol import ProcessHandle, ProcessLauncher, RunStrategy

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Seconds to wait for a killed process to be reaped
REAP_TIMEOUT: float = 5.0


def _get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    import pendulum  # noqa: PLC0415

    return pendulum.now("UTC").to_iso8601_string()


async def run_until_cancelled[T](
    cancel: anyio.Event,
    func: Callable[[], Awaitable[T]],
) -> tuple[bool, T | None]:
    """Await func, abandoning it as soon as cancel is set.

    Args:
        cancel: The stop signal.
        func: Coroutine function to run.

    Returns:
        A ``(completed, result)`` tuple. When cancellation won the race,
        completed is False and result is None.
    """
    completed = False
    result: T | None = None

    async with anyio.create_task_group() as tg:

        async def watch_cancel() -> None:
            await cancel.wait()
            tg.cancel_scope.cancel()

        tg.start_soon(watch_cancel)
        result = await func()
        completed = True
        tg.cancel_scope.cancel()

    return completed, result if completed else None


async def pace(delay: float, cancel: anyio.Event) -> None:
    """Sleep for the pacing delay, returning early if cancel is set."""
    with anyio.move_on_after(delay):
        await cancel.wait()


class _BaseStrategy:
    """Shared launch/pace plumbing for the run strategies."""

    __slots__ = ("_launcher", "_logger")

    mode_value: ClassVar[RunMode]

    def __init__(
        self,
        launcher: ProcessLauncher,
        logger: "FilteringBoundLogger",
    ) -> None:
        self._launcher = launcher
        self._logger = logger

    @property
    def mode(self) -> RunMode:
        """Return the run mode this strategy implements."""
        return self.mode_value

    async def run_once(
        self,
        spec: ProcessSpec,
        delay: float,
        cancel: anyio.Event,
    ) -> RunOutcome:
        """Run the process once, then wait out the pacing delay.

        The delay applies whatever the outcome of the run, and is cut short
        when cancel is set.
        """
        outcome = await self._execute(spec, cancel)
        await pace(delay, cancel)
        return outcome

    async def _execute(self, spec: ProcessSpec, cancel: anyio.Event) -> RunOutcome:
        raise NotImplementedError


@final
class SimpleStrategy(_BaseStrategy):
    """Runs a short-lived task and logs what it printed.

    Output is captured line by line. On cancellation the wait is abandoned
    but the process is left alone.
    """

    __slots__ = ("_output_limit",)

    mode_value = RunMode.SIMPLE

    def __init__(
        self,
        launcher: ProcessLauncher,
        logger: "FilteringBoundLogger",
        *,
        output_limit: int = 0,
    ) -> None:
        super().__init__(launcher, logger)
        self._output_limit = output_limit

    async def _execute(self, spec: ProcessSpec, cancel: anyio.Event) -> RunOutcome:
        started_at = _get_timestamp()
        try:
            handle = await self._launcher.launch(spec, capture_output=True)
        except Exception:
            self._logger.exception("process_start_failed", command=spec.display_command)
            return RunOutcome(
                reason=TerminalReason.START_FAILED,
                started_at=started_at,
                finished_at=_get_timestamp(),
            )

        log = self._logger.bind(pid=handle.pid, command=spec.display_command)
        log.debug("process_started")

        stdout = OutputBuffer(limit=self._output_limit)
        stderr = OutputBuffer(limit=self._output_limit)

        async def wait_with_capture() -> int:
            async with anyio.create_task_group() as tg:
                tg.start_soon(capture_output, handle, stdout, stderr)
                exit_code = await handle.wait()
            return exit_code

        reason = TerminalReason.CANCELLED
        exit_code: int | None = None
        try:
            completed, exit_code = await run_until_cancelled(cancel, wait_with_capture)
            if completed:
                reason = TerminalReason.EXITED
        except Exception:
            log.exception("process_failed")
            reason = TerminalReason.FAILED
            exit_code = handle.returncode
        finally:
            with anyio.CancelScope(shield=True):
                await handle.close_output()

        finished_at = _get_timestamp()

        if stdout:
            log.info("process_output", output=stdout.render())
        if stderr:
            log.error("process_error_output", output=stderr.render())
        if reason is not TerminalReason.CANCELLED:
            log.debug("process_exited", exit_code=exit_code)

        return RunOutcome(
            reason=reason,
            pid=handle.pid,
            exit_code=exit_code,
            stdout=stdout.text(),
            stderr=stderr.text(),
            started_at=started_at,
            finished_at=finished_at,
        )


@final
class DaemonStrategy(_BaseStrategy):
    """Runs a persistent process until it exits or the service stops.

    Output is not captured. A process still running when the iteration ends
    is killed, so no child outlives a stop request.
    """

    __slots__ = ()

    mode_value = RunMode.DAEMON

    async def _kill_if_running(self, handle: ProcessHandle) -> bool:
        """Kill and reap the process if it has not exited yet.

        Returns:
            True if the process was killed.
        """
        if handle.returncode is not None:
            return False
        handle.kill()
        with anyio.move_on_after(REAP_TIMEOUT, shield=True):
            _ = await handle.wait()
        return True

    async def _execute(self, spec: ProcessSpec, cancel: anyio.Event) -> RunOutcome:
        started_at = _get_timestamp()
        try:
            handle = await self._launcher.launch(spec, capture_output=False)
        except Exception:
            self._logger.exception(
                "process_start_failed", pid=None, command=spec.display_command
            )
            self._logger.info(
                "process_stopped", pid=None, command=spec.display_command, exit_code=None
            )
            return RunOutcome(
                reason=TerminalReason.START_FAILED,
                started_at=started_at,
                finished_at=_get_timestamp(),
            )

        log = self._logger.bind(pid=handle.pid, command=spec.display_command)
        log.info("process_started")

        reason = TerminalReason.CANCELLED
        exit_code: int | None = None
        killed = False
        try:
            completed, exit_code = await run_until_cancelled(cancel, handle.wait)
            if completed:
                reason = TerminalReason.EXITED
        except Exception:
            log.exception("process_failed")
            reason = TerminalReason.FAILED
        finally:
            killed = await self._kill_if_running(handle)
            exit_code = None if killed else handle.returncode
            log.info("process_stopped", exit_code=exit_code)

        if killed and reason is TerminalReason.CANCELLED:
            reason = TerminalReason.KILLED_ON_CANCEL

        return RunOutcome(
            reason=reason,
            pid=handle.pid,
            exit_code=exit_code,
            started_at=started_at,
            finished_at=_get_timestamp(),
        )


def create_strategy(
    mode: RunMode,
    launcher: ProcessLauncher,
    logger: "FilteringBoundLogger",
    *,
    output_limit: int = 0,
) -> RunStrategy:
    """Create the strategy for a run mode.

    Args:
        mode: The configured run mode.
        launcher: Launcher used to start the process.
        logger: Logger receiving lifecycle records.
        output_limit: Byte cap per captured stream (Simple mode only).

    Returns:
        The strategy implementing the mode.
    """
    if mode is RunMode.DAEMON:
        return DaemonStrategy(launcher, logger)
    return SimpleStrategy(launcher, logger, output_limit=output_limit)

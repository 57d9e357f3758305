"""Supervision loop driving one command for the lifetime of the service."""

from typing import TYPE_CHECKING, final

import anyio

from minisup.utils import create_supervisor_logger

from ._launcher import AnyioProcessLauncher
from ._models import ProcessSpec, RunMode, RunOutcome
from ._protocol import ProcessLauncher, RunStrategy
from ._strategies import create_strategy

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


@final
class Supervisor:
    """Runs one command over and over until the service is asked to stop.

    Each iteration launches the process through the strategy selected by the
    run mode, waits for it, logs the result and waits out the pacing delay.
    Iterations never overlap, so at most one child is alive at a time.

    The process spec, run mode and delay are fixed at construction and
    shared read-only by every iteration.
    """

    __slots__ = ("_delay", "_logger", "_spec", "_strategy")

    def __init__(
        self,
        spec: ProcessSpec,
        mode: RunMode = RunMode.SIMPLE,
        delay: float = 30.0,
        *,
        launcher: ProcessLauncher | None = None,
        logger: "FilteringBoundLogger | None" = None,
        output_limit: int = 0,
    ) -> None:
        """Initialize the supervisor.

        Args:
            spec: The command to supervise.
            mode: Run mode selecting the strategy.
            delay: Pacing delay in seconds between iterations.
            launcher: Process launcher. Uses AnyioProcessLauncher if None.
            logger: Logger for lifecycle records. Logs to stderr if None.
            output_limit: Byte cap per captured stream, 0 for no cap.
        """
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self._spec = spec
        self._delay = delay
        self._logger = logger or create_supervisor_logger()
        self._strategy: RunStrategy = create_strategy(
            mode,
            launcher or AnyioProcessLauncher(),
            self._logger,
            output_limit=output_limit,
        )

    @property
    def spec(self) -> ProcessSpec:
        """Return the supervised command."""
        return self._spec

    @property
    def mode(self) -> RunMode:
        """Return the run mode."""
        return self._strategy.mode

    @property
    def delay(self) -> float:
        """Return the pacing delay in seconds."""
        return self._delay

    async def run_once(self, cancel: anyio.Event) -> RunOutcome:
        """Run a single iteration, including its pacing delay.

        Args:
            cancel: The service stop signal.

        Returns:
            The outcome of the iteration.
        """
        return await self._strategy.run_once(self._spec, self._delay, cancel)

    async def run(self, cancel: anyio.Event) -> None:
        """Run iterations until cancel is set.

        Returns once cancellation is observed. Errors inside an iteration are
        logged by the strategy and never end the loop.

        Args:
            cancel: The service stop signal.
        """
        while not cancel.is_set():
            _ = await self.run_once(cancel)

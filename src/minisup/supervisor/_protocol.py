"""Protocol definitions for the supervisor.

This module defines the interfaces that decouple the supervision loop from
the operating system and from the run strategies:
- ProcessHandle: A launched child process
- ProcessLauncher: Factory that starts child processes
- RunStrategy: One supervised execution followed by the pacing delay
"""

from collections.abc import AsyncGenerator
from typing import Literal, Protocol, runtime_checkable

import anyio

from ._models import ProcessSpec, RunMode, RunOutcome

StreamName = Literal["stdout", "stderr"]


@runtime_checkable
class ProcessHandle(Protocol):
    """Protocol for a launched child process.

    A handle is owned by exactly one iteration and is discarded at its end.
    """

    @property
    def pid(self) -> int:
        """Return the process ID."""
        ...

    @property
    def returncode(self) -> int | None:
        """Return the exit code, or None while the process is running."""
        ...

    def read_lines(self, stream: StreamName) -> AsyncGenerator[str, None] | None:
        """Return an iterator over output lines, or None if not captured.

        Args:
            stream: Which output stream to read.
        """
        ...

    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""
        ...

    def kill(self) -> None:
        """Forcibly terminate the process."""
        ...

    async def close_output(self) -> None:
        """Close captured output pipes without terminating the process."""
        ...


@runtime_checkable
class ProcessLauncher(Protocol):
    """Protocol for starting child processes."""

    async def launch(
        self,
        spec: ProcessSpec,
        *,
        capture_output: bool,
    ) -> ProcessHandle:
        """Start the process described by spec.

        Args:
            spec: The command to launch.
            capture_output: Whether stdout and stderr are piped back.

        Raises:
            ProcessStartError: If the process could not be launched.
        """
        ...


@runtime_checkable
class RunStrategy(Protocol):
    """Protocol for a single supervised execution."""

    @property
    def mode(self) -> RunMode:
        """Return the run mode this strategy implements."""
        ...

    async def run_once(
        self,
        spec: ProcessSpec,
        delay: float,
        cancel: anyio.Event,
    ) -> RunOutcome:
        """Run the process once, then wait out the pacing delay.

        Args:
            spec: The command to launch.
            delay: Pacing delay in seconds, cut short by cancellation.
            cancel: The service stop signal.

        Returns:
            The outcome of the iteration.
        """
        ...

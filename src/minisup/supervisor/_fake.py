"""Fake process launcher for testing.

This module provides FakeLauncher and FakeProcessHandle, which implement the
launcher protocols without spawning real processes. Useful for unit testing
the supervision loop and the run strategies.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

import anyio

from minisup.exceptions import ProcessStartError

from ._models import ProcessSpec
from ._protocol import StreamName

# Exit code reported for a killed fake process (SIGKILL)
KILLED_EXIT_CODE: int = -9


@dataclass(slots=True)
class FakeProcessHandle:
    """Fake child process.

    The process "exits" with exit_code once runtime seconds have passed since
    launch. An exit_code of None means it runs until killed. When wait_error
    is set, wait() raises OSError until the process is killed.

    Example:
        >>> handle = FakeProcessHandle(pid=42, capture_output=True, runtime=0.1)
        >>> await handle.wait()
        0
    """

    pid: int
    capture_output: bool
    stdout_lines: tuple[str, ...] = ()
    stderr_lines: tuple[str, ...] = ()
    exit_code: int | None = 0
    runtime: float = 0.0
    wait_error: str | None = None
    kill_calls: int = 0
    output_closed: bool = False
    _killed_code: int | None = None
    _exit_at: float = field(init=False)
    _killed: anyio.Event = field(init=False)

    def __post_init__(self) -> None:
        self._exit_at = anyio.current_time() + self.runtime
        self._killed = anyio.Event()

    @property
    def returncode(self) -> int | None:
        """Return the exit code, or None while the process is running."""
        if self._killed_code is not None:
            return self._killed_code
        if self.exit_code is not None and anyio.current_time() >= self._exit_at:
            return self.exit_code
        return None

    @property
    def killed(self) -> bool:
        """Return whether kill() was called on a running process."""
        return self._killed_code is not None

    def read_lines(self, stream: StreamName) -> AsyncGenerator[str, None] | None:
        """Return the scripted lines for a stream, or None if not captured."""
        if not self.capture_output:
            return None
        lines = self.stdout_lines if stream == "stdout" else self.stderr_lines
        return self._emit(lines)

    async def _emit(self, lines: tuple[str, ...]) -> AsyncGenerator[str, None]:
        for line in lines:
            if self.output_closed:
                return
            await anyio.sleep(0)
            yield line

    async def wait(self) -> int:
        """Wait until the runtime elapses or the process is killed."""
        if self.wait_error is not None and not self.killed:
            await anyio.sleep(0)
            raise OSError(self.wait_error)
        if self.exit_code is None:
            await self._killed.wait()
        else:
            with anyio.move_on_after(max(0.0, self._exit_at - anyio.current_time())):
                await self._killed.wait()
        code = self.returncode
        assert code is not None  # noqa: S101
        return code

    def kill(self) -> None:
        """Terminate the process if it is still running."""
        self.kill_calls += 1
        if self.returncode is None:
            self._killed_code = KILLED_EXIT_CODE
            self._killed.set()

    async def close_output(self) -> None:
        """Mark the output pipes as closed."""
        self.output_closed = True


@dataclass(slots=True)
class FakeLauncher:
    """Fake process launcher that records every launch.

    Every launched handle is configured from the launcher's fields.

    Example:
        >>> launcher = FakeLauncher(stdout_lines=("hello",), runtime=0.01)
        >>> handle = await launcher.launch(spec, capture_output=True)
        >>> launcher.attempts
        1
    """

    stdout_lines: tuple[str, ...] = ()
    stderr_lines: tuple[str, ...] = ()
    exit_code: int | None = 0
    runtime: float = 0.0
    start_error: str | None = None
    wait_error: str | None = None
    attempts: int = 0
    handles: list[FakeProcessHandle] = field(default_factory=list)
    launch_times: list[float] = field(default_factory=list)
    specs: list[ProcessSpec] = field(default_factory=list)

    async def launch(
        self,
        spec: ProcessSpec,
        *,
        capture_output: bool,
    ) -> FakeProcessHandle:
        """Record the attempt and return a new fake handle.

        Raises:
            ProcessStartError: If start_error is set.
        """
        self.attempts += 1
        self.launch_times.append(anyio.current_time())
        self.specs.append(spec)
        await anyio.sleep(0)

        if self.start_error is not None:
            cause = FileNotFoundError(self.start_error)
            msg = f"Failed to start '{spec.display_command}': {cause}"
            raise ProcessStartError(msg, command=spec.display_command, cause=cause)

        handle = FakeProcessHandle(
            pid=1000 + self.attempts,
            capture_output=capture_output,
            stdout_lines=self.stdout_lines,
            stderr_lines=self.stderr_lines,
            exit_code=self.exit_code,
            runtime=self.runtime,
            wait_error=self.wait_error,
        )
        self.handles.append(handle)
        return handle

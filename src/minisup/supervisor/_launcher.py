"""Process launcher backed by anyio subprocesses."""

import shlex
import subprocess
from collections.abc import AsyncGenerator
from contextlib import suppress
from typing import final

import anyio
import anyio.abc
from anyio.streams.text import TextReceiveStream

from minisup.exceptions import ProcessStartError

from ._models import ProcessSpec
from ._protocol import StreamName


async def _iter_lines(
    stream: anyio.abc.ByteReceiveStream,
) -> AsyncGenerator[str, None]:
    """Yield decoded lines from a byte stream, without line terminators."""
    pending = ""
    try:
        async for chunk in TextReceiveStream(stream, errors="replace"):
            pending += chunk
            *lines, pending = pending.split("\n")
            for line in lines:
                yield line.rstrip("\r")
    except (anyio.ClosedResourceError, anyio.BrokenResourceError):
        # Our end of the pipe was closed
        return
    if pending:
        yield pending.rstrip("\r")


@final
class AnyioProcessHandle:
    """ProcessHandle wrapping an anyio process."""

    __slots__ = ("_process",)

    def __init__(self, process: anyio.abc.Process) -> None:
        self._process = process

    @property
    def pid(self) -> int:
        """Return the process ID."""
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        """Return the exit code, or None while the process is running."""
        return self._process.returncode

    def read_lines(self, stream: StreamName) -> AsyncGenerator[str, None] | None:
        """Return an iterator over output lines, or None if not captured."""
        source = self._process.stdout if stream == "stdout" else self._process.stderr
        if source is None:
            return None
        return _iter_lines(source)

    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""
        return await self._process.wait()

    def kill(self) -> None:
        """Forcibly terminate the process."""
        with suppress(ProcessLookupError):
            self._process.kill()

    async def close_output(self) -> None:
        """Close captured output pipes without terminating the process."""
        for stream in (self._process.stdout, self._process.stderr):
            if stream is not None:
                with suppress(OSError, anyio.BrokenResourceError):
                    await stream.aclose()


@final
class AnyioProcessLauncher:
    """Launches child processes with ``anyio.open_process``.

    The argument string is split shell-style and the command is executed
    directly, without a shell. Standard input is always closed.
    """

    __slots__ = ()

    async def launch(
        self,
        spec: ProcessSpec,
        *,
        capture_output: bool,
    ) -> AnyioProcessHandle:
        """Start the process described by spec.

        Args:
            spec: The command to launch.
            capture_output: Whether stdout and stderr are piped back.

        Returns:
            A handle to the running process.

        Raises:
            ProcessStartError: If the process could not be launched.
        """
        output = subprocess.PIPE if capture_output else None
        try:
            argv = [spec.command, *shlex.split(spec.arguments or "")]
            process = await anyio.open_process(
                argv,
                cwd=spec.working_directory,
                stdin=subprocess.DEVNULL,
                stdout=output,
                stderr=output,
            )
        except (OSError, ValueError) as e:
            msg = f"Failed to start '{spec.display_command}': {e}"
            raise ProcessStartError(msg, command=spec.display_command, cause=e) from e

        return AnyioProcessHandle(process)

"""Output capture for Simple mode.

Two producer tasks read stdout and stderr line by line and send them over a
bounded memory object stream to a single consumer that fills the buffers.
capture_output only returns once both producers hit end of stream, so no
line can be appended after the buffers are read for logging.
"""

import os
from contextlib import aclosing
from dataclasses import dataclass, field

import anyio
from anyio.streams.memory import MemoryObjectSendStream

from ._protocol import ProcessHandle, StreamName

# Pending lines between the readers and the consumer
MAX_PENDING_LINES: int = 256


@dataclass(slots=True)
class OutputBuffer:
    """Growable text buffer for one captured stream.

    Attributes:
        limit: Maximum bytes kept, or 0 to keep everything.
        dropped: Number of lines discarded after the limit was reached.
    """

    limit: int = 0
    dropped: int = 0
    _lines: list[str] = field(default_factory=list)
    _size: int = 0

    def append(self, line: str) -> None:
        """Append one line of output."""
        size = len(line.encode("utf-8", errors="replace")) + 1
        if self.dropped or (self.limit and self._size + size > self.limit):
            self.dropped += 1
            return
        self._lines.append(line)
        self._size += size

    @property
    def lines(self) -> list[str]:
        """Return a copy of the captured lines in emission order."""
        return list(self._lines)

    @property
    def truncated(self) -> bool:
        """Return whether lines were dropped because of the limit."""
        return self.dropped > 0

    def __len__(self) -> int:
        return len(self._lines) + self.dropped

    def text(self) -> str:
        """Return the captured lines, each terminated by a newline."""
        return "".join(f"{line}\n" for line in self._lines)

    def render(self) -> str:
        """Return the text as logged: prefixed with a line separator."""
        rendered = os.linesep + self.text()
        if self.truncated:
            rendered += f"[output truncated: {self.dropped} lines dropped]\n"
        return rendered


async def _pump(
    stream: StreamName,
    handle: ProcessHandle,
    send: MemoryObjectSendStream[tuple[StreamName, str]],
) -> None:
    lines = handle.read_lines(stream)
    async with send:
        if lines is None:
            return
        async with aclosing(lines):
            async for line in lines:
                await send.send((stream, line))


async def capture_output(
    handle: ProcessHandle,
    stdout: OutputBuffer,
    stderr: OutputBuffer,
) -> None:
    """Collect the process output into the buffers until both streams end.

    Args:
        handle: The running process.
        stdout: Buffer receiving standard output lines.
        stderr: Buffer receiving standard error lines.
    """
    buffers: dict[StreamName, OutputBuffer] = {"stdout": stdout, "stderr": stderr}
    send, receive = anyio.create_memory_object_stream[tuple[StreamName, str]](
        MAX_PENDING_LINES
    )

    async with anyio.create_task_group() as tg:
        async with send:
            tg.start_soon(_pump, "stdout", handle, send.clone())
            tg.start_soon(_pump, "stderr", handle, send.clone())

        async with receive:
            async for stream, line in receive:
                buffers[stream].append(line)

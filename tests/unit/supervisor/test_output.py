"""Tests for Simple mode output capture."""

import os

import anyio
import pytest

from minisup.supervisor import FakeProcessHandle, OutputBuffer, capture_output

pytestmark = pytest.mark.anyio


class TestOutputBuffer:
    def test_empty_buffer_is_falsy(self) -> None:
        buffer = OutputBuffer()

        assert not buffer
        assert buffer.text() == ""

    def test_text_terminates_every_line(self) -> None:
        buffer = OutputBuffer()
        buffer.append("first")
        buffer.append("second")

        assert buffer.text() == "first\nsecond\n"
        assert buffer.lines == ["first", "second"]

    def test_empty_lines_are_kept(self) -> None:
        buffer = OutputBuffer()
        buffer.append("")

        assert buffer
        assert buffer.text() == "\n"

    def test_render_starts_with_line_separator(self) -> None:
        buffer = OutputBuffer()
        buffer.append("hello")

        assert buffer.render() == f"{os.linesep}hello\n"

    def test_limit_drops_later_lines(self) -> None:
        buffer = OutputBuffer(limit=12)
        for line in ("aaaa", "bbbb", "cccc", "d"):
            buffer.append(line)

        assert buffer.lines == ["aaaa", "bbbb"]
        assert buffer.dropped == 2
        assert buffer.truncated
        assert len(buffer) == 4
        assert buffer.render().endswith("[output truncated: 2 lines dropped]\n")

    def test_zero_limit_keeps_everything(self) -> None:
        buffer = OutputBuffer(limit=0)
        for index in range(1000):
            buffer.append(f"line {index}")

        assert len(buffer.lines) == 1000
        assert not buffer.truncated


class TestCaptureOutput:
    async def test_collects_both_streams_in_order(self) -> None:
        handle = FakeProcessHandle(
            pid=1,
            capture_output=True,
            stdout_lines=tuple(f"out {i}" for i in range(50)),
            stderr_lines=tuple(f"err {i}" for i in range(30)),
        )
        stdout, stderr = OutputBuffer(), OutputBuffer()

        with anyio.fail_after(5):
            await capture_output(handle, stdout, stderr)

        assert stdout.lines == [f"out {i}" for i in range(50)]
        assert stderr.lines == [f"err {i}" for i in range(30)]

    async def test_more_lines_than_pending_capacity(self) -> None:
        handle = FakeProcessHandle(
            pid=1,
            capture_output=True,
            stdout_lines=tuple(str(i) for i in range(2000)),
        )
        stdout, stderr = OutputBuffer(), OutputBuffer()

        with anyio.fail_after(5):
            await capture_output(handle, stdout, stderr)

        assert len(stdout.lines) == 2000
        assert not stderr

    async def test_uncaptured_process_yields_nothing(self) -> None:
        handle = FakeProcessHandle(
            pid=1, capture_output=False, stdout_lines=("ignored",)
        )
        stdout, stderr = OutputBuffer(), OutputBuffer()

        with anyio.fail_after(5):
            await capture_output(handle, stdout, stderr)

        assert not stdout
        assert not stderr

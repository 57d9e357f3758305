"""Run the strategies against real child processes."""

import os
import signal
import sys
from contextlib import suppress
from pathlib import Path

import anyio
import pytest

from minisup.supervisor import (
    AnyioProcessLauncher,
    DaemonStrategy,
    ProcessSpec,
    SimpleStrategy,
    TerminalReason,
)
from tests.conftest import LogCapture

pytestmark = [
    pytest.mark.anyio,
    pytest.mark.skipif(
        not sys.platform.startswith("linux"), reason="reads process state from /proc"
    ),
]


def python_spec(script: str, folder: Path | None = None) -> ProcessSpec:
    return ProcessSpec(
        command=sys.executable,
        working_directory=str(folder) if folder else None,
        arguments=f'-c "{script}"',
    )


def is_running(pid: int) -> bool:
    """Return whether pid is a live process, counting zombies as exited."""
    try:
        stat = Path(f"/proc/{pid}/stat").read_text()
    except FileNotFoundError:
        return False
    state = stat.rsplit(")", 1)[1].split()[0]
    return state != "Z"


async def cancel_after(cancel: anyio.Event, seconds: float) -> None:
    await anyio.sleep(seconds)
    cancel.set()


class TestSimpleStrategyProcesses:
    async def test_captures_stdout_and_stderr(self, log_capture: LogCapture) -> None:
        spec = python_spec(
            "import sys; print('one'); print('two'); "
            "print('oops', file=sys.stderr); sys.exit(3)"
        )
        strategy = SimpleStrategy(AnyioProcessLauncher(), log_capture.logger)

        with anyio.fail_after(30):
            outcome = await strategy.run_once(spec, 0, anyio.Event())

        assert outcome.reason is TerminalReason.EXITED
        assert outcome.exit_code == 3
        assert outcome.stdout == "one\ntwo\n"
        assert outcome.stderr == "oops\n"
        assert len(log_capture.find("process_output")) == 1
        assert len(log_capture.find("process_error_output")) == 1

    async def test_runs_in_working_directory(
        self, tmp_path: Path, log_capture: LogCapture
    ) -> None:
        spec = python_spec("import os; print(os.getcwd())", folder=tmp_path)
        strategy = SimpleStrategy(AnyioProcessLauncher(), log_capture.logger)

        with anyio.fail_after(30):
            outcome = await strategy.run_once(spec, 0, anyio.Event())

        assert Path(outcome.stdout.strip()).resolve() == tmp_path.resolve()

    async def test_final_line_without_newline(self, log_capture: LogCapture) -> None:
        spec = python_spec("import sys; sys.stdout.write('no newline')")
        strategy = SimpleStrategy(AnyioProcessLauncher(), log_capture.logger)

        with anyio.fail_after(30):
            outcome = await strategy.run_once(spec, 0, anyio.Event())

        assert outcome.stdout == "no newline\n"

    async def test_cancel_does_not_kill(self, log_capture: LogCapture) -> None:
        spec = python_spec("import time; print('started', flush=True); time.sleep(30)")
        strategy = SimpleStrategy(AnyioProcessLauncher(), log_capture.logger)
        cancel = anyio.Event()

        with anyio.fail_after(30):
            async with anyio.create_task_group() as tg:
                tg.start_soon(cancel_after, cancel, 1.0)
                outcome = await strategy.run_once(spec, 0, cancel)

        assert outcome.pid is not None
        try:
            assert outcome.reason is TerminalReason.CANCELLED
            assert is_running(outcome.pid)
        finally:
            with suppress(ProcessLookupError):
                os.kill(outcome.pid, signal.SIGKILL)

    async def test_missing_executable(self, log_capture: LogCapture) -> None:
        spec = ProcessSpec(command="minisup-no-such-executable")
        strategy = SimpleStrategy(AnyioProcessLauncher(), log_capture.logger)

        with anyio.fail_after(30):
            outcome = await strategy.run_once(spec, 0, anyio.Event())

        assert outcome.reason is TerminalReason.START_FAILED
        assert log_capture.events(level="error") == ["process_start_failed"]


class TestDaemonStrategyProcesses:
    async def test_cancel_kills_process(self, log_capture: LogCapture) -> None:
        spec = python_spec("import time; time.sleep(30)")
        strategy = DaemonStrategy(AnyioProcessLauncher(), log_capture.logger)
        cancel = anyio.Event()

        with anyio.fail_after(30):
            async with anyio.create_task_group() as tg:
                tg.start_soon(cancel_after, cancel, 0.5)
                outcome = await strategy.run_once(spec, 0, cancel)

        assert outcome.reason is TerminalReason.KILLED_ON_CANCEL
        assert outcome.pid is not None
        assert not is_running(outcome.pid)
        assert log_capture.events(level="error") == []

    async def test_natural_exit(self, log_capture: LogCapture) -> None:
        spec = python_spec("import sys; sys.exit(5)")
        strategy = DaemonStrategy(AnyioProcessLauncher(), log_capture.logger)

        with anyio.fail_after(30):
            outcome = await strategy.run_once(spec, 0, anyio.Event())

        assert outcome.reason is TerminalReason.EXITED
        assert outcome.exit_code == 5
        [stopped] = log_capture.find("process_stopped")
        assert stopped["exit_code"] == 5

"""Supervisor package for running one command as a background service.

This package provides the supervision loop and the two run strategies that
drive a single configured child process, one iteration at a time, until a
cancellation signal is raised.

Key Components:
    - ProcessSpec: Immutable description of the command
    - RunMode: Simple or Daemon
    - RunOutcome: Record of one iteration
    - ProcessLauncher / ProcessHandle: OS process abstraction
    - AnyioProcessLauncher: Launcher backed by anyio subprocesses
    - SimpleStrategy / DaemonStrategy: Run strategies
    - Supervisor: The supervision loop
    - FakeLauncher: In-memory launcher for tests

Example:
    >>> import anyio
    >>> from minisup.supervisor import ProcessSpec, RunMode, Supervisor
    >>> spec = ProcessSpec.from_values("backup.sh", "/opt/app", "--full")
    >>> supervisor = Supervisor(spec, RunMode.SIMPLE, delay=60.0)
    >>> cancel = anyio.Event()
    >>> await supervisor.run(cancel)  # Blocks until cancel.set()
"""

from ._fake import FakeLauncher, FakeProcessHandle
from ._launcher import AnyioProcessHandle, AnyioProcessLauncher
from ._models import (
    ProcessSpec,
    RunMode,
    RunOutcome,
    TerminalReason,
    build_display_command,
)
from ._output import OutputBuffer, capture_output
from ._protocol import ProcessHandle, ProcessLauncher, RunStrategy, StreamName
from ._strategies import (
    DaemonStrategy,
    SimpleStrategy,
    create_strategy,
    pace,
    run_until_cancelled,
)
from ._supervisor import Supervisor

__all__ = [
    "AnyioProcessHandle",
    "AnyioProcessLauncher",
    "DaemonStrategy",
    "FakeLauncher",
    "FakeProcessHandle",
    "OutputBuffer",
    "ProcessHandle",
    "ProcessLauncher",
    "ProcessSpec",
    "RunMode",
    "RunOutcome",
    "RunStrategy",
    "SimpleStrategy",
    "StreamName",
    "Supervisor",
    "TerminalReason",
    "build_display_command",
    "capture_output",
    "create_strategy",
    "pace",
    "run_until_cancelled",
]

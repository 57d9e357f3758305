"""Data models for the supervisor.

This module defines the core data types for a supervised run:
- RunMode: Which run strategy drives the child process
- TerminalReason: How a single iteration ended
- ProcessSpec: Immutable description of the command to launch
- RunOutcome: Immutable record of one iteration
"""

import os
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from minisup.exceptions import ConfigValidationError


class RunMode(StrEnum):
    """Run strategies for the supervised command.

    - SIMPLE: Short-lived task; output is captured, the process is expected to
      exit on its own and is never killed by the supervisor.
    - DAEMON: Persistent process; output is not captured, the process is
      killed if it is still running when the iteration ends.
    """

    SIMPLE = "simple"
    DAEMON = "daemon"

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse a run mode case-insensitively (``Simple``, ``daemon``...).

        Raises:
            ValueError: If the value names no run mode.
        """
        return cls(value.strip().lower())


class TerminalReason(StrEnum):
    """Ways a single iteration can end.

    - EXITED: The process exited on its own
    - CANCELLED: The supervisor stopped waiting because of cancellation
    - START_FAILED: The process could not be launched
    - KILLED_ON_CANCEL: The process was still running on cancellation and was killed
    - FAILED: Waiting for the process failed with an unexpected error
    """

    EXITED = "exited"
    CANCELLED = "cancelled"
    START_FAILED = "start_failed"
    KILLED_ON_CANCEL = "killed_on_cancel"
    FAILED = "failed"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_display_command(
    command: str,
    working_directory: str | None = None,
    arguments: str | None = None,
) -> str:
    """Build the human-readable command line used in log records.

    The working directory is joined with the command when present, and the
    argument string is appended after a single space.

    Example:
        >>> build_display_command("run.sh", "/opt/app", "--fast")
        '/opt/app/run.sh --fast'
        >>> build_display_command("run.sh", None, "--fast")
        'run.sh --fast'
    """
    display = os.path.join(working_directory, command) if working_directory else command
    if arguments:
        display = f"{display} {arguments}"
    return display


@dataclass(frozen=True, slots=True)
class ProcessSpec:
    """Immutable description of the supervised command.

    Built once per service startup and shared read-only by every iteration.

    Attributes:
        command: Executable to launch.
        working_directory: Working directory for the process.
        arguments: Argument string, split shell-style at launch time.
        display_command: Command line reconstruction used only for logging.
    """

    command: str
    working_directory: str | None = None
    arguments: str | None = None
    display_command: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.command or not self.command.strip():
            msg = "command is required"
            raise ConfigValidationError(
                msg, key="command", value=self.command, expected="non-empty string"
            )
        object.__setattr__(
            self,
            "display_command",
            build_display_command(self.command, self.working_directory, self.arguments),
        )

    @classmethod
    def from_values(
        cls,
        command: str | None,
        working_directory: str | None = None,
        arguments: str | None = None,
    ) -> Self:
        """Create a spec from raw configuration values.

        Values are trimmed and empty strings are treated as missing.

        Raises:
            ConfigValidationError: If the command is missing or blank.
        """
        return cls(
            command=_clean(command) or "",
            working_directory=_clean(working_directory),
            arguments=_clean(arguments),
        )


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Record of a single supervised iteration.

    Attributes:
        reason: How the iteration ended.
        pid: Process ID, or None if the process never started.
        exit_code: Exit code, or None if the process never started, was
            killed, or was abandoned while still running.
        stdout: Captured standard output (Simple mode only).
        stderr: Captured standard error (Simple mode only).
        started_at: ISO 8601 timestamp of the start attempt.
        finished_at: ISO 8601 timestamp of the end of the wait.
    """

    reason: TerminalReason
    pid: int | None = None
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    started_at: str | None = None
    finished_at: str | None = None

    @property
    def started(self) -> bool:
        """Return whether the process was launched."""
        return self.pid is not None

"""minisup exceptions."""

from pathlib import Path
from typing import Any


class MinisupError(Exception):
    """Base exception for minisup errors."""


class ConfigError(MinisupError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Supervisor Exceptions
# =============================================================================


class SupervisorError(MinisupError):
    """Base exception for supervisor errors."""


class ProcessStartError(SupervisorError):
    """Raised when the operating system refuses to launch the child process.

    Attributes:
        command: The display command of the process that failed to start.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and launch context.

        Args:
            message: Human-readable error message.
            command: The display command of the process.
            cause: The underlying exception.
        """
        super().__init__(message)
        self.command: str = command
        self.cause: Exception | None = cause

"""Configuration models."""

from ._common import LogFormat, LogLevel
from ._config import SupervisorConfig
from ._logging import LoggingConfig

__all__ = ["LogFormat", "LogLevel", "LoggingConfig", "SupervisorConfig"]

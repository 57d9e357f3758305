"""Utility helpers for minisup."""

from ._logging import LogFormatType, create_supervisor_logger

__all__ = ["LogFormatType", "create_supervisor_logger"]

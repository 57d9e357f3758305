"""Command-line interface for minisup."""

from ._app import app, create_app, main

__all__ = ["app", "create_app", "main"]

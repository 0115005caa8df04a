"""Caller-visible failures raised by the command-line layer.

Discovery and matching never raise; absence is an empty result.
Only the front door turns ``FjsfError`` into a message and exit status.
"""

from __future__ import annotations


class FjsfError(Exception):
    """User-facing error carrying the process exit status to use."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class NoItemsError(FjsfError):
    """Raised when discovery produced nothing to search."""

"""
Exception hierarchy for the harness.
"""
from __future__ import annotations


class NewsQaError(Exception):
    """Base class for harness errors."""


class InvalidInputError(NewsQaError, ValueError):
    """Raised when a validator receives a structurally invalid collection."""


class CheckError(NewsQaError):
    """Raised when a browser-facing check cannot analyse the page."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Failed to perform {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)

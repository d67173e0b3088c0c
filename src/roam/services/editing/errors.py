"""
Route Editing Errors.

Domain-specific exceptions for incremental route edits.
These errors are independent of the transport layer (CLI, HTTP, etc.).
"""

from __future__ import annotations

from typing import Optional


class EditError(Exception):
    """Base exception for route editing operations."""

    pass


class EditRejectedError(EditError):
    """Raised when an edit is invalid for the route it targets."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation}: {reason}")


class RerouteError(EditError):
    """
    Raised when re-routing the legs touched by an edit failed.

    The committed route is left as it was before the edit.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        msg = f"Failed to re-route after {operation}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)

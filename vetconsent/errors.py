"""Errors raised by resource clients."""

from __future__ import annotations

from typing import Any, Optional


class ResourceError(Exception):
    """Base error for failed resource operations.

    Raised directly when the server answered but the response could not be
    understood (e.g. a created record without an id).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class NetworkError(ResourceError):
    """No usable response was received (connectivity, timeout or 5xx)."""


class RejectedError(ResourceError):
    """The server rejected the request with a structured error payload."""


class InvalidTransitionError(RuntimeError):
    """Raised when the workflow state machine is asked for an illegal move."""

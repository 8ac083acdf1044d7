"""Map step failures onto workflow-level outcomes.

This table is the only place that decides whether a failure aborts the
workflow. Action and consent steps are fatal whatever went wrong; the medical
data step is best-effort and never aborts.
"""

from __future__ import annotations

import asyncio

import httpx
from pydantic import BaseModel

from .contracts import ErrorKind, WorkflowStep
from .errors import NetworkError, RejectedError, ResourceError

NON_FATAL_STEPS = frozenset({WorkflowStep.ATTACH_MEDICAL_DATA})


class Classification(BaseModel):
    """Disposition of a single failed step."""

    kind: ErrorKind
    fatal: bool
    retryable: bool = False


def error_kind(error: BaseException) -> ErrorKind:
    """Return the error taxonomy entry for ``error``."""
    if isinstance(error, NetworkError):
        return ErrorKind.NETWORK
    if isinstance(error, (httpx.TransportError, asyncio.TimeoutError)):
        return ErrorKind.NETWORK
    if isinstance(error, RejectedError):
        return ErrorKind.REJECTED
    return ErrorKind.UNKNOWN


def classify(step: WorkflowStep, error: BaseException) -> Classification:
    """Classify ``error`` raised while executing ``step``."""
    kind = error_kind(error)
    return Classification(
        kind=kind,
        fatal=step not in NON_FATAL_STEPS,
        retryable=kind is ErrorKind.NETWORK,
    )


def describe_error(error: BaseException) -> str:
    """Best human-readable description of ``error``."""
    if isinstance(error, ResourceError):
        return error.message
    return str(error) or type(error).__name__

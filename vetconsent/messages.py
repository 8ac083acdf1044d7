"""User-facing messages for terminal workflow results.

Exactly one message is produced per result, even when several steps failed.
"""

from __future__ import annotations

from .contracts import (
    ActionKind,
    ErrorKind,
    WorkflowResult,
    WorkflowStatus,
    WorkflowStep,
)

_ACTION_LABELS = {
    ActionKind.PROCEDURE: "Procedure",
    ActionKind.VACCINE: "Vaccine",
}

_STEP_LABELS = {
    WorkflowStep.VALIDATE: "the form",
    WorkflowStep.RESOLVE_ACTION: "the record",
    WorkflowStep.ATTACH_MEDICAL_DATA: "the medical data",
    WorkflowStep.CREATE_CONSENT: "the consent",
}

_FAILURE_MESSAGES = {
    ErrorKind.VALIDATION: "Please complete the required fields: {detail}",
    ErrorKind.NETWORK: "Could not connect to the server. Check your internet connection.",
    ErrorKind.ALREADY_IN_PROGRESS: "This consent is already being submitted.",
    ErrorKind.UNKNOWN: "The registration could not be completed.",
}


def describe(result: WorkflowResult) -> str:
    """Return the single message to show for ``result``."""
    label = _ACTION_LABELS.get(result.action_kind, "Record")

    if result.status is WorkflowStatus.SUCCESS:
        return f"{label} and consent registered successfully"

    if result.status is WorkflowStatus.PARTIAL_SUCCESS:
        degraded = _STEP_LABELS[result.warnings[0].step] if result.warnings else "a step"
        return (
            f"{label} and consent registered successfully, "
            f"but {degraded} could not be saved"
        )

    error = result.error
    if error is None:
        return _FAILURE_MESSAGES[ErrorKind.UNKNOWN]
    if error.kind is ErrorKind.REJECTED:
        return error.message or _FAILURE_MESSAGES[ErrorKind.UNKNOWN]
    message = _FAILURE_MESSAGES[error.kind].format(detail=error.message)
    if error.step is WorkflowStep.CREATE_CONSENT and result.action_id:
        message += f" {label} was saved, but the consent was not signed."
    return message

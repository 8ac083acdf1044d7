from vetconsent.contracts import (
    ActionKind,
    ErrorKind,
    StepWarning,
    WorkflowResult,
    WorkflowStatus,
    WorkflowStep,
)
from vetconsent.messages import describe


def test_success_message_names_action():
    result = WorkflowResult(
        status=WorkflowStatus.SUCCESS,
        action_id="v1",
        action_kind=ActionKind.VACCINE,
        consent_id="c1",
    )
    assert describe(result) == "Vaccine and consent registered successfully"


def test_partial_success_names_degraded_step():
    result = WorkflowResult(
        status=WorkflowStatus.PARTIAL_SUCCESS,
        action_id="p1",
        action_kind=ActionKind.PROCEDURE,
        consent_id="c1",
        warnings=[
            StepWarning(
                step=WorkflowStep.ATTACH_MEDICAL_DATA,
                kind=ErrorKind.NETWORK,
                message="offline",
            )
        ],
    )
    message = describe(result)
    assert message.startswith("Procedure and consent registered successfully")
    assert "medical data" in message


def test_rejected_failure_uses_server_message():
    result = WorkflowResult.failed(
        ErrorKind.REJECTED, WorkflowStep.RESOLVE_ACTION, "Invalid procedure type"
    )
    assert describe(result) == "Invalid procedure type"


def test_network_failure_after_action_mentions_saved_record():
    result = WorkflowResult.failed(
        ErrorKind.NETWORK,
        WorkflowStep.CREATE_CONSENT,
        "timed out",
        action_id="p1",
        action_kind=ActionKind.PROCEDURE,
        warnings=[
            StepWarning(
                step=WorkflowStep.ATTACH_MEDICAL_DATA,
                kind=ErrorKind.NETWORK,
                message="offline",
            )
        ],
    )
    message = describe(result)
    assert message.startswith("Could not connect to the server.")
    assert "Procedure was saved" in message
    assert "offline" not in message


def test_validation_and_guard_messages():
    validation = WorkflowResult.failed(
        ErrorKind.VALIDATION, WorkflowStep.VALIDATE, "signature is required"
    )
    guard = WorkflowResult.failed(
        ErrorKind.ALREADY_IN_PROGRESS, WorkflowStep.VALIDATE, "busy"
    )
    assert "signature is required" in describe(validation)
    assert describe(guard) == "This consent is already being submitted."

"""Contract model tests."""

import base64
from datetime import date

from vetconsent.contracts import (
    ActionKind,
    ConsentPayload,
    MedicalPayload,
    ProcedurePayload,
    VaccinePayload,
    WorkflowRequest,
    WorkflowResult,
    WorkflowStatus,
)


def _consent() -> ConsentPayload:
    return ConsentPayload(
        signer_name="  Ana Lopez ",
        signer_relation="Propietario",
        signature=b"sig",
        emergency_contact_phone=" 555 ",
    )


def test_action_payload_is_discriminated_from_dict():
    request = WorkflowRequest.model_validate(
        {
            "subject_id": "p1",
            "action_payload": {
                "action_kind": "VACCINE",
                "nombreVacuna": "Rabies",
                "lote": "L1",
                "caducidad": "2027-01-01",
                "fechaAplicacion": "2026-01-01",
            },
            "consent_payload": {"signer_name": "Ana"},
        }
    )
    assert isinstance(request.action_payload, VaccinePayload)
    assert request.action_kind is ActionKind.VACCINE
    assert request.creates_action


def test_existing_action_kind_is_used_without_payload():
    request = WorkflowRequest(
        subject_id="p1",
        existing_action_id="v9",
        existing_action_kind=ActionKind.VACCINE,
        consent_payload=_consent(),
    )
    assert request.action_kind is ActionKind.VACCINE
    assert request.validation_problems() == []


def test_existing_action_requires_kind():
    request = WorkflowRequest(
        subject_id="p1", existing_action_id="v9", consent_payload=_consent()
    )
    assert request.validation_problems() == [
        "existing_action_kind is required with existing_action_id"
    ]


def test_consent_wire_format():
    wire = _consent().to_wire()
    assert wire["consentType"] == "CIRUGIA"
    assert wire["signerName"] == "Ana Lopez"
    assert wire["emergencyContactPhone"] == "555"
    assert wire["legalTextVersion"] == "v1"
    assert "emergencyContactName" not in wire
    prefix = "data:image/png;base64,"
    assert wire["signatureBase64"].startswith(prefix)
    assert base64.b64decode(wire["signatureBase64"][len(prefix):]) == b"sig"


def test_payload_form_fields_use_server_names():
    procedure = ProcedurePayload(
        procedure_type="cirugia", description="Spay", performed_on=date(2026, 3, 1)
    )
    assert procedure.form_fields() == {
        "tipo": "cirugia",
        "descripcion": "Spay",
        "fecha": "2026-03-01",
    }
    medical = MedicalPayload(weight=4.5, heart_rate=120, fasting=True)
    assert medical.to_wire() == {
        "peso": 4.5,
        "frecuenciaCardiaca": 120,
        "ayuno": True,
    }


def test_resume_from_reuses_created_action():
    request = WorkflowRequest(
        subject_id="p1",
        action_payload=ProcedurePayload(procedure_type="otro", description="x"),
        medical_payload=MedicalPayload(notes="n"),
        consent_payload=_consent(),
    )
    failed = WorkflowResult(
        status=WorkflowStatus.FAILED, action_id="p7", action_kind=ActionKind.PROCEDURE
    )

    resumed = request.resume_from(failed)

    assert resumed.existing_action_id == "p7"
    assert resumed.existing_action_kind is ActionKind.PROCEDURE
    assert resumed.action_payload is None
    assert resumed.medical_payload is None
    assert resumed.validation_problems() == []

"""Request, payload and result contracts for the consent workflow."""

from __future__ import annotations

import base64
from datetime import date
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ActionKind(str, Enum):
    PROCEDURE = "PROCEDURE"
    VACCINE = "VACCINE"


class ConsentType(str, Enum):
    """Consent classifications understood by the server."""

    ANESTHESIA = "ANESTESIA"
    SURGERY = "CIRUGIA"
    HOSPITALIZATION = "HOSPITALIZACION"
    AESTHETIC = "ESTETICA"
    VACCINATION = "VACUNACION"
    EUTHANASIA = "EUTANASIA"
    OTHER = "OTRO"


class ProcedureType(str, Enum):
    DEWORMING = "desparasitacion"
    DENTAL_CLEANING = "limpieza_dental"
    SURGERY = "cirugia"
    GENERAL_CHECKUP = "chequeo_general"
    RADIOGRAPHY = "radiografia"
    OTHER = "otro"


class WorkflowStatus(str, Enum):
    SUCCESS = "SUCCESS"
    PARTIAL_SUCCESS = "PARTIAL_SUCCESS"
    FAILED = "FAILED"


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NETWORK = "NETWORK"
    REJECTED = "REJECTED"
    UNKNOWN = "UNKNOWN"
    ALREADY_IN_PROGRESS = "ALREADY_IN_PROGRESS"


class WorkflowStep(str, Enum):
    VALIDATE = "VALIDATE"
    RESOLVE_ACTION = "RESOLVE_ACTION"
    ATTACH_MEDICAL_DATA = "ATTACH_MEDICAL_DATA"
    CREATE_CONSENT = "CREATE_CONSENT"


class EvidenceFile(BaseModel):
    """Photo or document uploaded alongside a new procedure or vaccine."""

    filename: str
    content: bytes
    content_type: str = "image/jpeg"


class ProcedurePayload(BaseModel):
    """Data needed to create a new procedure record."""

    model_config = ConfigDict(populate_by_name=True)

    action_kind: Literal["PROCEDURE"] = "PROCEDURE"
    procedure_type: ProcedureType = Field(alias="tipo")
    description: str = Field(alias="descripcion")
    performed_on: Optional[date] = Field(default=None, alias="fecha")
    evidence: Optional[EvidenceFile] = None

    def form_fields(self) -> dict[str, str]:
        fields = {
            "tipo": self.procedure_type.value,
            "descripcion": self.description,
        }
        if self.performed_on:
            fields["fecha"] = self.performed_on.isoformat()
        return fields


class VaccinePayload(BaseModel):
    """Data needed to create a new vaccination record."""

    model_config = ConfigDict(populate_by_name=True)

    action_kind: Literal["VACCINE"] = "VACCINE"
    vaccine_name: str = Field(alias="nombreVacuna")
    batch: str = Field(alias="lote")
    expires_on: date = Field(alias="caducidad")
    applied_on: date = Field(alias="fechaAplicacion")
    evidence: Optional[EvidenceFile] = None

    def form_fields(self) -> dict[str, str]:
        return {
            "nombreVacuna": self.vaccine_name,
            "lote": self.batch,
            "caducidad": self.expires_on.isoformat(),
            "fechaAplicacion": self.applied_on.isoformat(),
        }


ActionPayload = Annotated[
    Union[ProcedurePayload, VaccinePayload], Field(discriminator="action_kind")
]


class MedicalPayload(BaseModel):
    """Vital signs recorded for a procedure."""

    model_config = ConfigDict(populate_by_name=True)

    weight: Optional[float] = Field(default=None, alias="peso")
    temperature: Optional[float] = Field(default=None, alias="temperatura")
    heart_rate: Optional[int] = Field(default=None, alias="frecuenciaCardiaca")
    respiratory_rate: Optional[int] = Field(
        default=None, alias="frecuenciaRespiratoria"
    )
    pulse: Optional[str] = Field(default=None, alias="pulso")
    mucous_membranes: Optional[str] = Field(default=None, alias="mucosas")
    capillary_refill: Optional[str] = Field(default=None, alias="tllc")
    hydration: Optional[str] = Field(default=None, alias="hidratacion")
    body_condition: Optional[int] = Field(default=None, alias="condicionCorporal")
    fasting: bool = Field(default=False, alias="ayuno")
    notes: Optional[str] = Field(default=None, alias="notas")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ConsentPayload(BaseModel):
    """Signed consent form contents."""

    consent_type: ConsentType = ConsentType.SURGERY
    signer_name: str = ""
    signer_relation: str = ""
    signature: Optional[bytes] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: str = ""
    legal_text_version: str = "v1"

    def signature_data_url(self) -> str:
        encoded = base64.b64encode(self.signature or b"").decode("ascii")
        return f"data:image/png;base64,{encoded}"

    def to_wire(self) -> dict:
        data = {
            "consentType": self.consent_type.value,
            "signerName": self.signer_name.strip(),
            "signerRelation": self.signer_relation.strip(),
            "signatureBase64": self.signature_data_url(),
            "emergencyContactPhone": self.emergency_contact_phone.strip(),
            "legalTextVersion": self.legal_text_version,
        }
        contact_name = (self.emergency_contact_name or "").strip()
        if contact_name:
            data["emergencyContactName"] = contact_name
        return data


class WorkflowRequest(BaseModel):
    """Input to a single consent workflow run.

    The mutual exclusion between ``existing_action_id`` and ``action_payload``
    is deliberately not enforced here: the orchestrator checks the shape and
    reports problems as a ``VALIDATION`` failure instead of raising.
    """

    subject_id: str
    existing_action_id: Optional[str] = None
    existing_action_kind: Optional[ActionKind] = None
    action_payload: Optional[ActionPayload] = None
    medical_payload: Optional[MedicalPayload] = None
    consent_payload: ConsentPayload

    @property
    def action_kind(self) -> Optional[ActionKind]:
        if self.action_payload is not None:
            return ActionKind(self.action_payload.action_kind)
        return self.existing_action_kind

    @property
    def creates_action(self) -> bool:
        return self.action_payload is not None

    def validation_problems(self) -> List[str]:
        """Return human-readable shape problems, empty when runnable."""
        problems: List[str] = []
        if not self.subject_id.strip():
            problems.append("subject_id is required")
        has_existing = bool(self.existing_action_id)
        has_payload = self.action_payload is not None
        if has_existing and has_payload:
            problems.append(
                "existing_action_id and action_payload are mutually exclusive"
            )
        elif not has_existing and not has_payload:
            problems.append("one of existing_action_id or action_payload is required")
        elif has_existing and self.existing_action_kind is None:
            problems.append("existing_action_kind is required with existing_action_id")

        consent = self.consent_payload
        if not consent.signer_name.strip():
            problems.append("signer name is required")
        if not consent.emergency_contact_phone.strip():
            problems.append("emergency contact phone is required")
        if not consent.signature:
            problems.append("signature is required")
        return problems

    def resume_from(self, result: "WorkflowResult") -> "WorkflowRequest":
        """Build a resubmission that reuses the action created by ``result``."""
        if not result.action_id:
            return self.model_copy()
        return self.model_copy(
            update={
                "existing_action_id": result.action_id,
                "existing_action_kind": result.action_kind or self.action_kind,
                "action_payload": None,
                "medical_payload": None,
            }
        )


class StepWarning(BaseModel):
    """Non-fatal failure of a step."""

    step: WorkflowStep
    kind: ErrorKind
    message: str


class WorkflowError(BaseModel):
    """Failure that terminated the workflow."""

    kind: ErrorKind
    step: WorkflowStep
    message: str
    status_code: Optional[int] = None


class WorkflowResult(BaseModel):
    """Terminal outcome of one workflow run."""

    status: WorkflowStatus
    action_id: Optional[str] = None
    action_kind: Optional[ActionKind] = None
    consent_id: Optional[str] = None
    warnings: List[StepWarning] = Field(default_factory=list)
    error: Optional[WorkflowError] = None

    @property
    def succeeded(self) -> bool:
        return self.status is not WorkflowStatus.FAILED

    @property
    def is_partial(self) -> bool:
        return self.status is WorkflowStatus.PARTIAL_SUCCESS

    @classmethod
    def failed(
        cls,
        kind: ErrorKind,
        step: WorkflowStep,
        message: str,
        **kwargs,
    ) -> "WorkflowResult":
        status_code = kwargs.pop("status_code", None)
        return cls(
            status=WorkflowStatus.FAILED,
            error=WorkflowError(
                kind=kind, step=step, message=message, status_code=status_code
            ),
            **kwargs,
        )

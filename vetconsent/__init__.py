"""vetconsent: informed-consent signing workflow for veterinary records."""

from .classifier import Classification, classify
from .clients import HttpResourceClient, InMemoryResourceClient, ResourceClient, get_client
from .contracts import (
    ActionKind,
    ConsentPayload,
    ConsentType,
    ErrorKind,
    MedicalPayload,
    ProcedurePayload,
    VaccinePayload,
    WorkflowRequest,
    WorkflowResult,
    WorkflowStatus,
)
from .messages import describe
from .orchestrator import ConsentOrchestrator
from .state import WorkflowState, WorkflowStateMachine

__version__ = "0.1.0"
__all__ = [
    "ActionKind",
    "Classification",
    "ConsentOrchestrator",
    "ConsentPayload",
    "ConsentType",
    "ErrorKind",
    "HttpResourceClient",
    "InMemoryResourceClient",
    "MedicalPayload",
    "ProcedurePayload",
    "ResourceClient",
    "VaccinePayload",
    "WorkflowRequest",
    "WorkflowResult",
    "WorkflowState",
    "WorkflowStateMachine",
    "WorkflowStatus",
    "classify",
    "describe",
    "get_client",
]

"""Consent workflow orchestration."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .classifier import classify, describe_error
from .clients import ResourceClient
from .contracts import (
    ActionKind,
    ErrorKind,
    ProcedurePayload,
    StepWarning,
    WorkflowRequest,
    WorkflowResult,
    WorkflowStatus,
    WorkflowStep,
)
from .state import WorkflowState, WorkflowStateMachine

logger = logging.getLogger(__name__)


class _StepFailed(Exception):
    """Internal signal that a fatal step ended the run."""

    def __init__(self, result: WorkflowResult) -> None:
        super().__init__(result.error.message if result.error else "")
        self.result = result


class ConsentOrchestrator:
    """Drives one consent submission from action to signed consent.

    Steps run strictly in order: resolve the action id (creating the
    procedure or vaccine when needed), attach medical data to new
    procedures, then create the consent. Each failure is handed to
    :func:`~vetconsent.classifier.classify` which decides whether the run
    stops. A run always ends in exactly one :class:`WorkflowResult`; nothing
    is retried here.

    An orchestrator guards a single submission. While it is not ``IDLE`` a
    second :meth:`run` returns ``ALREADY_IN_PROGRESS`` without touching the
    network.
    """

    def __init__(
        self,
        client: ResourceClient,
        state_machine: Optional[WorkflowStateMachine] = None,
    ) -> None:
        self._client = client
        self._state = state_machine or WorkflowStateMachine()

    @property
    def state(self) -> WorkflowState:
        return self._state.state

    @property
    def state_machine(self) -> WorkflowStateMachine:
        return self._state

    def reset(self) -> None:
        """Allow resubmission after a failed run.

        Raises:
            InvalidTransitionError: If the workflow is running or succeeded.
        """
        self._state.reset()

    async def run(self, request: WorkflowRequest) -> WorkflowResult:
        """Execute the workflow for ``request`` and return its terminal result."""
        if not self._state.is_idle:
            logger.warning(
                f"Rejected resubmission for subject_id={request.subject_id}: "
                f"workflow is {self._state.state.value}"
            )
            return WorkflowResult.failed(
                ErrorKind.ALREADY_IN_PROGRESS,
                WorkflowStep.VALIDATE,
                "This submission is already being processed",
            )

        problems = request.validation_problems()
        if problems:
            logger.info(
                f"Consent request for subject_id={request.subject_id} "
                f"failed validation: {'; '.join(problems)}"
            )
            return WorkflowResult.failed(
                ErrorKind.VALIDATION, WorkflowStep.VALIDATE, "; ".join(problems)
            )

        # Claim the guard before the first await.
        self._state.transition(WorkflowState.RESOLVING_ACTION)
        # The chain must reach a terminal state even if the caller goes away.
        return await asyncio.shield(self._execute(request))

    async def _execute(self, request: WorkflowRequest) -> WorkflowResult:
        kind = request.action_kind
        warnings: List[StepWarning] = []
        action_id: Optional[str] = None

        try:
            action_id = await self._resolve_action(request, kind)

            if self._should_attach_medical_data(request, kind):
                self._state.transition(WorkflowState.ATTACHING_MEDICAL_DATA)
                warning = await self._attach_medical_data(request, action_id)
                if warning is not None:
                    warnings.append(warning)

            self._state.transition(WorkflowState.CREATING_CONSENT)
            consent_id = await self._create_consent(request, kind, action_id, warnings)
        except _StepFailed as failure:
            self._state.transition(WorkflowState.FAILED)
            return failure.result
        except BaseException as e:
            logger.error(
                f"Consent workflow for subject_id={request.subject_id} aborted "
                f"in {self._state.state.value}: {e!r}"
            )
            if not self._state.is_terminal:
                self._state.transition(WorkflowState.FAILED)
            raise

        status = WorkflowStatus.PARTIAL_SUCCESS if warnings else WorkflowStatus.SUCCESS
        self._state.transition(
            WorkflowState.PARTIALLY_SUCCEEDED
            if warnings
            else WorkflowState.SUCCEEDED
        )
        logger.info(
            f"Consent workflow finished with {status.value} for "
            f"subject_id={request.subject_id} action_id={action_id} "
            f"consent_id={consent_id}"
        )
        return WorkflowResult(
            status=status,
            action_id=action_id,
            action_kind=kind,
            consent_id=consent_id,
            warnings=warnings,
        )

    async def _resolve_action(
        self, request: WorkflowRequest, kind: ActionKind
    ) -> str:
        if request.existing_action_id:
            logger.info(
                f"Using existing {kind.value.lower()} {request.existing_action_id} "
                f"for subject_id={request.subject_id}"
            )
            return request.existing_action_id

        payload = request.action_payload
        try:
            if kind is ActionKind.VACCINE:
                action_id = await self._client.create_vaccine(
                    request.subject_id, payload
                )
            else:
                action_id = await self._client.create_procedure(
                    request.subject_id, payload
                )
        except Exception as e:
            raise self._fatal(WorkflowStep.RESOLVE_ACTION, e, request) from e

        logger.info(
            f"Created {kind.value.lower()} {action_id} for subject_id={request.subject_id}"
        )
        return action_id

    def _should_attach_medical_data(
        self, request: WorkflowRequest, kind: ActionKind
    ) -> bool:
        if request.medical_payload is None:
            return False
        if kind is ActionKind.PROCEDURE and isinstance(
            request.action_payload, ProcedurePayload
        ):
            return True
        logger.warning(
            f"Ignoring medical data for subject_id={request.subject_id}: "
            "it is only recorded for newly created procedures"
        )
        return False

    async def _attach_medical_data(
        self, request: WorkflowRequest, action_id: str
    ) -> Optional[StepWarning]:
        step = WorkflowStep.ATTACH_MEDICAL_DATA
        try:
            medical_id = await self._client.create_medical_data(
                action_id, request.medical_payload
            )
        except Exception as e:
            outcome = classify(step, e)
            if outcome.fatal:
                raise self._fatal(step, e, request, action_id=action_id) from e
            logger.warning(
                f"Medical data for procedure {action_id} was not saved "
                f"({outcome.kind.value}): {describe_error(e)}"
            )
            return StepWarning(step=step, kind=outcome.kind, message=describe_error(e))

        logger.info(f"Attached medical data {medical_id} to procedure {action_id}")
        return None

    async def _create_consent(
        self,
        request: WorkflowRequest,
        kind: ActionKind,
        action_id: str,
        warnings: List[StepWarning],
    ) -> str:
        step = WorkflowStep.CREATE_CONSENT
        try:
            return await self._client.create_consent(
                kind, action_id, request.consent_payload
            )
        except Exception as e:
            raise self._fatal(
                step, e, request, action_id=action_id, warnings=warnings
            ) from e

    def _fatal(
        self,
        step: WorkflowStep,
        error: Exception,
        request: WorkflowRequest,
        action_id: Optional[str] = None,
        warnings: Optional[List[StepWarning]] = None,
    ) -> _StepFailed:
        outcome = classify(step, error)
        message = describe_error(error)
        logger.error(
            f"Consent workflow failed at {step.value} ({outcome.kind.value}) "
            f"for subject_id={request.subject_id}: {message}"
        )
        return _StepFailed(
            WorkflowResult.failed(
                outcome.kind,
                step,
                message,
                status_code=getattr(error, "status_code", None),
                action_id=action_id,
                action_kind=request.action_kind,
                warnings=list(warnings or []),
            )
        )

"""Finite state machine tracking consent workflow progress."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from .errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    IDLE = "IDLE"
    RESOLVING_ACTION = "RESOLVING_ACTION"
    ATTACHING_MEDICAL_DATA = "ATTACHING_MEDICAL_DATA"
    CREATING_CONSENT = "CREATING_CONSENT"
    SUCCEEDED = "SUCCEEDED"
    PARTIALLY_SUCCEEDED = "PARTIALLY_SUCCEEDED"
    FAILED = "FAILED"


TERMINAL_STATES: FrozenSet[WorkflowState] = frozenset(
    {
        WorkflowState.SUCCEEDED,
        WorkflowState.PARTIALLY_SUCCEEDED,
        WorkflowState.FAILED,
    }
)

TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowState]] = {
    WorkflowState.IDLE: frozenset({WorkflowState.RESOLVING_ACTION}),
    WorkflowState.RESOLVING_ACTION: frozenset(
        {
            WorkflowState.ATTACHING_MEDICAL_DATA,
            WorkflowState.CREATING_CONSENT,
            WorkflowState.FAILED,
        }
    ),
    WorkflowState.ATTACHING_MEDICAL_DATA: frozenset(
        {WorkflowState.CREATING_CONSENT, WorkflowState.FAILED}
    ),
    WorkflowState.CREATING_CONSENT: frozenset(
        {
            WorkflowState.SUCCEEDED,
            WorkflowState.PARTIALLY_SUCCEEDED,
            WorkflowState.FAILED,
        }
    ),
    WorkflowState.SUCCEEDED: frozenset(),
    WorkflowState.PARTIALLY_SUCCEEDED: frozenset(),
    # only reachable through ``reset``
    WorkflowState.FAILED: frozenset({WorkflowState.IDLE}),
}

StateListener = Callable[[WorkflowState, WorkflowState], None]


class WorkflowStateMachine:
    """Observable workflow state.

    Callers get read access through :attr:`state`, :attr:`history`,
    :meth:`subscribe` and :meth:`wait_terminal`; only the orchestrator moves
    the machine forward.
    """

    def __init__(self) -> None:
        self._state = WorkflowState.IDLE
        self._history: List[Tuple[WorkflowState, WorkflowState]] = []
        self._listeners: List[StateListener] = []
        self._terminal_event: Optional[asyncio.Event] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is WorkflowState.IDLE

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def history(self) -> List[Tuple[WorkflowState, WorkflowState]]:
        """Transitions taken so far as ``(previous, current)`` pairs."""
        return list(self._history)

    def can_transition(self, target: WorkflowState) -> bool:
        return target in TRANSITIONS[self._state]

    def transition(self, target: WorkflowState) -> None:
        """Move to ``target`` and notify listeners.

        Raises:
            InvalidTransitionError: If ``target`` is not reachable from the
                current state.
        """
        if target is WorkflowState.IDLE:
            raise InvalidTransitionError("Use reset() to return to IDLE")
        self._move(target)

    def reset(self) -> None:
        """Return a failed workflow to ``IDLE`` so it can be resubmitted."""
        if self._state is WorkflowState.IDLE:
            return
        self._move(WorkflowState.IDLE)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_terminal(self) -> WorkflowState:
        """Wait until the workflow reaches a terminal state."""
        if self.is_terminal:
            return self._state
        if self._terminal_event is None:
            self._terminal_event = asyncio.Event()
        await self._terminal_event.wait()
        return self._state

    def _move(self, target: WorkflowState) -> None:
        previous = self._state
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Cannot move workflow from {previous.value} to {target.value}"
            )
        self._state = target
        self._history.append((previous, target))
        logger.debug(f"Workflow state {previous.value} -> {target.value}")

        if target in TERMINAL_STATES and self._terminal_event is not None:
            self._terminal_event.set()
        elif target is WorkflowState.IDLE:
            self._terminal_event = None

        for listener in list(self._listeners):
            try:
                listener(previous, target)
            except Exception as e:
                logger.error(
                    f"State listener {listener!r} failed on "
                    f"{previous.value} -> {target.value}: {e}"
                )

"""In-memory resource client for testing."""

from __future__ import annotations

import asyncio
import itertools
from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..contracts import ConsentPayload, MedicalPayload, ProcedurePayload, VaccinePayload
from ..errors import RejectedError
from ..legal import LegalTextCatalog
from .base import ResourceClient


class InMemoryResourceClient(ResourceClient):
    """Stores created records in dictionaries and records every call.

    Failures can be injected per operation name with :meth:`fail_on`; a
    ``gate`` can be installed with :meth:`hold` to keep an operation pending
    until released.
    """

    def __init__(self, legal_texts: Optional[Dict[str, Dict[str, str]]] = None) -> None:
        self.records: Dict[str, Dict[str, Any]] = defaultdict(dict)
        self.calls: List[Tuple[str, tuple]] = []
        self._failures: Dict[str, BaseException] = {}
        self._gates: Dict[str, asyncio.Event] = {}
        self._ids: Dict[str, Iterator[int]] = defaultdict(lambda: itertools.count(1))
        self._legal_texts = legal_texts or {}

    def fail_on(self, operation: str, error: BaseException) -> None:
        """Raise ``error`` whenever ``operation`` is called."""
        self._failures[operation] = error

    def clear_failures(self) -> None:
        """Stop raising every error registered with :meth:`fail_on`."""
        self._failures.clear()

    def hold(self, operation: str) -> asyncio.Event:
        """Block ``operation`` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[operation] = gate
        return gate

    def calls_to(self, operation: str) -> List[tuple]:
        return [args for name, args in self.calls if name == operation]

    async def _call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        gate = self._gates.get(operation)
        if gate is not None:
            await gate.wait()
        error = self._failures.get(operation)
        if error is not None:
            raise error

    def _store(self, collection: str, prefix: str, record: Dict[str, Any]) -> str:
        record_id = f"{prefix}{next(self._ids[collection])}"
        self.records[collection][record_id] = {"id": record_id, **record}
        return record_id

    async def create_procedure(self, subject_id: str, payload: ProcedurePayload) -> str:
        await self._call("create_procedure", subject_id, payload)
        return self._store(
            "procedures", "p", {"petId": subject_id, **payload.form_fields()}
        )

    async def create_vaccine(self, subject_id: str, payload: VaccinePayload) -> str:
        await self._call("create_vaccine", subject_id, payload)
        return self._store(
            "vaccines", "v", {"petId": subject_id, **payload.form_fields()}
        )

    async def create_medical_data(self, action_id: str, payload: MedicalPayload) -> str:
        await self._call("create_medical_data", action_id, payload)
        return self._store(
            "medical_data", "m", {"procedureId": action_id, **payload.to_wire()}
        )

    async def create_procedure_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        await self._call("create_procedure_consent", action_id, consent)
        return self._store(
            "consents", "c", {"procedureId": action_id, **consent.to_wire()}
        )

    async def create_vaccine_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        await self._call("create_vaccine_consent", action_id, consent)
        return self._store(
            "consents", "c", {"vaccineId": action_id, **consent.to_wire()}
        )

    async def get_legal_texts(self) -> LegalTextCatalog:
        await self._call("get_legal_texts")
        return LegalTextCatalog(texts=self._legal_texts)

    async def get_consent(self, consent_id: str) -> dict:
        await self._call("get_consent", consent_id)
        record = self.records["consents"].get(consent_id)
        if record is None:
            raise RejectedError("Consent record not found", status_code=404)
        return record

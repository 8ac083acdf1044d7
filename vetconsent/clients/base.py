"""Base resource client interface for the veterinary records API."""

from __future__ import annotations

import abc

from ..contracts import (
    ActionKind,
    ConsentPayload,
    MedicalPayload,
    ProcedurePayload,
    VaccinePayload,
)
from ..legal import LegalTextCatalog


class ResourceClient(metaclass=abc.ABCMeta):
    """Abstract client for the server operations the workflow depends on.

    Every operation returns the created record's id or raises a
    :class:`~vetconsent.errors.ResourceError` subclass.
    """

    async def connect(self) -> None:
        """Open underlying connections (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close underlying connections (no-op by default)."""
        pass

    async def __aenter__(self) -> "ResourceClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()

    @abc.abstractmethod
    async def create_procedure(self, subject_id: str, payload: ProcedurePayload) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def create_vaccine(self, subject_id: str, payload: VaccinePayload) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def create_medical_data(self, action_id: str, payload: MedicalPayload) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def create_procedure_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def create_vaccine_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_legal_texts(self) -> LegalTextCatalog:
        """Fetch the versioned legal texts shown before signing."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_consent(self, consent_id: str) -> dict:
        """Fetch a stored consent record."""
        raise NotImplementedError

    async def create_consent(
        self, kind: ActionKind, action_id: str, consent: ConsentPayload
    ) -> str:
        """Create the consent operation matching ``kind``."""
        if kind is ActionKind.VACCINE:
            return await self.create_vaccine_consent(action_id, consent)
        return await self.create_procedure_consent(action_id, consent)

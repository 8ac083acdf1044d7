"""HTTP resource client backed by httpx."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..contracts import (
    ConsentPayload,
    EvidenceFile,
    MedicalPayload,
    ProcedurePayload,
    VaccinePayload,
)
from ..errors import NetworkError, RejectedError, ResourceError
from ..legal import LegalTextCatalog
from ..session import SessionProvider
from ..utils import retry
from .base import ResourceClient

logger = logging.getLogger(__name__)


class HttpResourceClient(ResourceClient):
    """Talks to the veterinary records REST API.

    Transport failures, timeouts and 5xx answers raise
    :class:`~vetconsent.errors.NetworkError`. 4xx answers with an ``error``
    field raise :class:`~vetconsent.errors.RejectedError` carrying that
    message; any other 4xx raises a plain
    :class:`~vetconsent.errors.ResourceError`. Only connection attempts that
    never reached the server are retried, so a create request is sent at most
    once.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3005",
        session: Optional[SessionProvider] = None,
        timeout: float = 30.0,
        connect_retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.connect_retries = connect_retries
        self._session = session
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _headers(self) -> dict[str, str]:
        if self._session is None:
            return {}
        token = await self._session.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        await self.connect()
        headers = await self._headers()
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self._client.request(
                    method, path, headers=headers, **kwargs
                )
                break
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                if attempt > self.connect_retries:
                    raise NetworkError(f"Could not reach server: {e}") from e
                logger.warning(
                    f"Connection to {self.base_url} failed on attempt {attempt}: {e}"
                )
                await retry.schedule_retry(attempt)
            except httpx.TimeoutException as e:
                raise NetworkError(f"Request to {path} timed out") from e
            except httpx.TransportError as e:
                raise NetworkError(f"Request to {path} failed: {e}") from e

        return self._parse(response)

    def _parse(self, response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            body = None

        error_message = body.get("error") if isinstance(body, dict) else None
        if response.status_code >= 500:
            raise NetworkError(
                error_message or f"Server error {response.status_code}",
                status_code=response.status_code,
                detail=body,
            )
        if response.status_code >= 400:
            if error_message:
                raise RejectedError(
                    error_message, status_code=response.status_code, detail=body
                )
            raise ResourceError(
                f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                detail=body,
            )
        if not isinstance(body, dict):
            raise ResourceError(
                "Unexpected response body", status_code=response.status_code
            )
        return body

    @staticmethod
    def _created_id(body: dict, key: str) -> str:
        record = body.get(key)
        if not isinstance(record, dict) or not record.get("id"):
            raise ResourceError(f"Response is missing {key}.id", detail=body)
        return str(record["id"])

    @staticmethod
    def _evidence_files(evidence: Optional[EvidenceFile]) -> Optional[dict]:
        if evidence is None:
            return None
        return {
            "evidencia": (evidence.filename, evidence.content, evidence.content_type)
        }

    async def create_procedure(self, subject_id: str, payload: ProcedurePayload) -> str:
        body = await self._request(
            "POST",
            f"/pets/{subject_id}/procedures",
            data=payload.form_fields(),
            files=self._evidence_files(payload.evidence),
        )
        return self._created_id(body, "procedure")

    async def create_vaccine(self, subject_id: str, payload: VaccinePayload) -> str:
        body = await self._request(
            "POST",
            f"/pets/{subject_id}/vaccines",
            data=payload.form_fields(),
            files=self._evidence_files(payload.evidence),
        )
        return self._created_id(body, "vaccine")

    async def create_medical_data(self, action_id: str, payload: MedicalPayload) -> str:
        body = await self._request(
            "POST", f"/procedures/{action_id}/medical-data", json=payload.to_wire()
        )
        return self._created_id(body, "medicalData")

    async def create_procedure_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        body = await self._request(
            "POST", f"/consents/procedure/{action_id}", json=consent.to_wire()
        )
        return self._created_id(body, "consentRecord")

    async def create_vaccine_consent(
        self, action_id: str, consent: ConsentPayload
    ) -> str:
        body = await self._request(
            "POST", f"/consents/vaccine/{action_id}", json=consent.to_wire()
        )
        return self._created_id(body, "consentRecord")

    async def get_legal_texts(self) -> LegalTextCatalog:
        body = await self._request("GET", "/legal-texts")
        return LegalTextCatalog.from_response(body)

    async def get_consent(self, consent_id: str) -> dict:
        body = await self._request("GET", f"/consents/{consent_id}")
        consent = body.get("consent")
        if not isinstance(consent, dict):
            raise ResourceError("Response is missing consent", detail=body)
        return consent

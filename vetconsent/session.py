"""Session identity handed to the workflow by the caller."""

from __future__ import annotations

from typing import Literal, Optional, Protocol

from pydantic import BaseModel, Field

from .config import ConsentConfig
from .contracts import ConsentPayload, ConsentType


class Identity(BaseModel):
    """Who is signed in. Only read, never mutated, by the workflow."""

    name: str = ""
    role: Literal["user", "vet"] = "user"
    user_id: Optional[str] = Field(default=None, description="Account id")

    @property
    def is_vet(self) -> bool:
        return self.role == "vet"


class SessionProvider(Protocol):
    """Supplies the current identity and credentials for API requests."""

    @property
    def identity(self) -> Identity:
        """Currently signed-in identity."""

    async def get_token(self) -> Optional[str]:
        """Bearer token for the next request, if any."""


class StaticSession:
    """Session with a fixed identity and token."""

    def __init__(self, identity: Identity, token: Optional[str] = None) -> None:
        self._identity = identity
        self._token = token

    @property
    def identity(self) -> Identity:
        return self._identity

    async def get_token(self) -> Optional[str]:
        return self._token


def build_consent_payload(
    identity: Optional[Identity],
    consent_type: ConsentType = ConsentType.SURGERY,
    config: Optional[ConsentConfig] = None,
    signer_relation: Optional[str] = None,
    legal_text_version: Optional[str] = None,
    **fields,
) -> ConsentPayload:
    """Create a consent payload with the signer prefilled from ``identity``.

    Explicit ``signer_name`` in ``fields`` wins over the identity's name.
    ``signer_relation`` and ``legal_text_version`` default to the values in
    ``config``.
    """
    config = config or ConsentConfig()
    signer_name = fields.pop("signer_name", None)
    if signer_name is None:
        signer_name = identity.name if identity else ""
    return ConsentPayload(
        consent_type=consent_type,
        signer_name=signer_name,
        signer_relation=signer_relation or config.default_signer_relation,
        legal_text_version=legal_text_version or config.legal_text_version,
        **fields,
    )

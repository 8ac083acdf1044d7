"""Versioned legal texts shown before signing."""

from __future__ import annotations

from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

from .contracts import ConsentType

DEFAULT_VERSION = "v1"


class LegalTextCatalog(BaseModel):
    """Legal texts keyed by consent type code, then by version."""

    texts: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict) -> "LegalTextCatalog":
        return cls(texts=data.get("legalTexts") or {})

    def versions(self, consent_type: Union[ConsentType, str]) -> list[str]:
        return sorted(self.texts.get(_code(consent_type), {}))

    def text_for(
        self, consent_type: Union[ConsentType, str], version: str = DEFAULT_VERSION
    ) -> Optional[str]:
        return self.texts.get(_code(consent_type), {}).get(version)

    def text_or_default(
        self, consent_type: Union[ConsentType, str], version: str = DEFAULT_VERSION
    ) -> Optional[str]:
        """Text for the type, falling back to the generic consent text."""
        return self.text_for(consent_type, version) or self.text_for(
            ConsentType.OTHER, DEFAULT_VERSION
        )


def _code(consent_type: Union[ConsentType, str]) -> str:
    if isinstance(consent_type, ConsentType):
        return consent_type.value
    return consent_type

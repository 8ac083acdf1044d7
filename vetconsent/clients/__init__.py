"""Resource client factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import VetConsentConfig, load_config
from ..session import SessionProvider
from .base import ResourceClient
from .http import HttpResourceClient
from .inmemory import InMemoryResourceClient


def get_client(
    backend: Optional[str] = None,
    config: Optional[VetConsentConfig] = None,
    session: Optional[SessionProvider] = None,
) -> ResourceClient:
    """Factory function to get the configured resource client."""

    config = config or load_config()
    backend = (
        backend or os.getenv("VETCONSENT_CLIENT") or config.client.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryResourceClient()
    elif backend == "http":
        return HttpResourceClient(
            base_url=config.api.base_url,
            session=session,
            timeout=config.api.timeout,
            connect_retries=config.api.connect_retries,
        )
    else:
        raise ValueError(f"Unsupported client backend: {backend}")


__all__ = [
    "ResourceClient",
    "HttpResourceClient",
    "InMemoryResourceClient",
    "get_client",
]

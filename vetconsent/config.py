from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel


class ApiConfig(BaseModel):
    """Configuration for the veterinary records API."""

    base_url: str = "http://localhost:3005"
    timeout: float = 30.0
    connect_retries: int = 2


class ClientConfig(BaseModel):
    """Resource client selection."""

    backend: Literal["http", "inmemory"] = "http"


class ConsentConfig(BaseModel):
    legal_text_version: str = "v1"
    default_signer_relation: str = "Propietario"


class VetConsentConfig(BaseModel):
    """Top-level configuration model."""

    api: ApiConfig = ApiConfig()
    client: ClientConfig = ClientConfig()
    consent: ConsentConfig = ConsentConfig()


def load_config(path: Optional[str] = None) -> VetConsentConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to VETCONSENT_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("VETCONSENT_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = VetConsentConfig(**data)
    else:
        config = VetConsentConfig()

    env_api_url = os.getenv("VETCONSENT_API_URL")
    if env_api_url:
        config.api.base_url = env_api_url
    return config

"""Tests for configuration loading."""

import pytest

from vetconsent.clients import HttpResourceClient, InMemoryResourceClient, get_client
from vetconsent.config import load_config


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
api:
  base_url: https://vet.example.com/api
  timeout: 10
client:
  backend: inmemory
consent:
  legal_text_version: v2
"""
    )
    monkeypatch.setenv("VETCONSENT_CONFIG", str(config_path))
    monkeypatch.delenv("VETCONSENT_API_URL", raising=False)

    config = load_config()
    assert config.api.base_url == "https://vet.example.com/api"
    assert config.api.timeout == 10
    assert config.api.connect_retries == 2
    assert config.client.backend == "inmemory"
    assert config.consent.legal_text_version == "v2"


def test_env_overrides_base_url(tmp_path, monkeypatch):
    monkeypatch.setenv("VETCONSENT_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("VETCONSENT_API_URL", "http://10.0.0.5:3005")

    config = load_config()
    assert config.api.base_url == "http://10.0.0.5:3005"


def test_get_client_uses_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
api:
  base_url: http://confighost:3005
  connect_retries: 0
"""
    )
    monkeypatch.setenv("VETCONSENT_CONFIG", str(config_path))
    monkeypatch.delenv("VETCONSENT_API_URL", raising=False)
    monkeypatch.delenv("VETCONSENT_CLIENT", raising=False)

    client = get_client()
    assert isinstance(client, HttpResourceClient)
    assert client.base_url == "http://confighost:3005"
    assert client.connect_retries == 0


def test_get_client_backend_override(monkeypatch):
    monkeypatch.setenv("VETCONSENT_CLIENT", "inmemory")
    assert isinstance(get_client(), InMemoryResourceClient)

    with pytest.raises(ValueError):
        get_client(backend="carrier-pigeon")

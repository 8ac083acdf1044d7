import pytest

from vetconsent.clients.inmemory import InMemoryResourceClient
from vetconsent.config import ConsentConfig
from vetconsent.contracts import ConsentType
from vetconsent.legal import LegalTextCatalog
from vetconsent.session import Identity, StaticSession, build_consent_payload

TEXTS = {
    "CIRUGIA": {"v1": "CONSENTIMIENTO INFORMADO PARA CIRUGIA"},
    "OTRO": {"v1": "CONSENTIMIENTO INFORMADO"},
}


def test_catalog_lookup_and_fallback():
    catalog = LegalTextCatalog.from_response({"legalTexts": TEXTS})

    assert catalog.text_for(ConsentType.SURGERY) == TEXTS["CIRUGIA"]["v1"]
    assert catalog.text_for("CIRUGIA", "v2") is None
    assert catalog.text_for(ConsentType.EUTHANASIA) is None
    assert catalog.text_or_default(ConsentType.EUTHANASIA) == TEXTS["OTRO"]["v1"]
    assert catalog.versions(ConsentType.SURGERY) == ["v1"]


def test_catalog_from_empty_response():
    assert LegalTextCatalog.from_response({}).texts == {}


@pytest.mark.asyncio
async def test_inmemory_client_serves_legal_texts():
    client = InMemoryResourceClient(legal_texts=TEXTS)
    catalog = await client.get_legal_texts()
    assert catalog.text_for(ConsentType.OTHER) == TEXTS["OTRO"]["v1"]


def test_consent_payload_prefilled_from_identity():
    identity = Identity(name="Dr. Ruiz", role="vet")

    payload = build_consent_payload(
        identity,
        consent_type=ConsentType.ANESTHESIA,
        emergency_contact_phone="555",
    )

    assert payload.signer_name == "Dr. Ruiz"
    assert payload.signer_relation == "Propietario"
    assert payload.consent_type is ConsentType.ANESTHESIA
    assert identity.is_vet


def test_explicit_signer_name_wins():
    payload = build_consent_payload(Identity(name="Ana"), signer_name="Luis")
    assert payload.signer_name == "Luis"
    assert build_consent_payload(None).signer_name == ""


def test_consent_defaults_come_from_config():
    config = ConsentConfig(legal_text_version="v2", default_signer_relation="Tutor")

    payload = build_consent_payload(Identity(name="Ana"), config=config)
    assert payload.signer_relation == "Tutor"
    assert payload.legal_text_version == "v2"
    assert payload.to_wire()["legalTextVersion"] == "v2"

    payload = build_consent_payload(
        Identity(name="Ana"), config=config, signer_relation="Propietario"
    )
    assert payload.signer_relation == "Propietario"
    assert payload.legal_text_version == "v2"


@pytest.mark.asyncio
async def test_static_session_returns_token():
    session = StaticSession(Identity(name="Ana"), token="tok")
    assert await session.get_token() == "tok"
    assert session.identity.name == "Ana"

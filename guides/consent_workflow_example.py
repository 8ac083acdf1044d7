"""Example showing a procedure consent submission with progress feedback."""

import asyncio
import logging
from datetime import date

from vetconsent import (
    ConsentOrchestrator,
    MedicalPayload,
    ProcedurePayload,
    WorkflowRequest,
    describe,
    get_client,
)
from vetconsent.config import load_config
from vetconsent.contracts import ConsentType
from vetconsent.errors import ResourceError
from vetconsent.session import Identity, StaticSession, build_consent_payload


async def main():
    logging.basicConfig(level=logging.INFO)

    config = load_config()
    session = StaticSession(Identity(name="Ana Lopez", role="vet"), token="dev-token")
    # VETCONSENT_CLIENT=inmemory runs without a server
    client = get_client(config=config, session=session)

    async with client:
        try:
            catalog = await client.get_legal_texts()
            print(catalog.text_or_default(ConsentType.SURGERY) or "Legal text unavailable")
        except ResourceError as e:
            print(f"Could not load legal texts: {e.message}")

        request = WorkflowRequest(
            subject_id="pet-123",
            action_payload=ProcedurePayload(
                procedure_type="cirugia",
                description="Ovariohysterectomy",
                performed_on=date.today(),
            ),
            medical_payload=MedicalPayload(weight=12.4, temperature=38.6, fasting=True),
            consent_payload=build_consent_payload(
                session.identity,
                consent_type=ConsentType.SURGERY,
                config=config.consent,
                signature=b"<png bytes from signature pad>",
                emergency_contact_phone="+52 555 123 4567",
            ),
        )

        orchestrator = ConsentOrchestrator(client)
        orchestrator.state_machine.subscribe(
            lambda previous, current: print(f"{previous.value} -> {current.value}")
        )
        result = await orchestrator.run(request)
        print(describe(result))


if __name__ == "__main__":
    asyncio.run(main())

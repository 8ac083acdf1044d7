import asyncio

import httpx
import pytest

from vetconsent.classifier import classify, describe_error
from vetconsent.contracts import ErrorKind, WorkflowStep
from vetconsent.errors import NetworkError, RejectedError, ResourceError


@pytest.mark.parametrize(
    "error, kind",
    [
        (NetworkError("offline"), ErrorKind.NETWORK),
        (httpx.ReadTimeout("slow"), ErrorKind.NETWORK),
        (asyncio.TimeoutError(), ErrorKind.NETWORK),
        (RejectedError("bad payload", status_code=400), ErrorKind.REJECTED),
        (ResourceError("missing id"), ErrorKind.UNKNOWN),
        (RuntimeError("boom"), ErrorKind.UNKNOWN),
    ],
)
def test_error_kinds(error, kind):
    assert classify(WorkflowStep.RESOLVE_ACTION, error).kind is kind


@pytest.mark.parametrize(
    "error",
    [NetworkError("offline"), RejectedError("bad"), RuntimeError("boom")],
)
def test_fatality_depends_on_step(error):
    assert classify(WorkflowStep.RESOLVE_ACTION, error).fatal
    assert classify(WorkflowStep.CREATE_CONSENT, error).fatal
    assert not classify(WorkflowStep.ATTACH_MEDICAL_DATA, error).fatal


def test_only_network_failures_are_retryable():
    assert classify(WorkflowStep.CREATE_CONSENT, NetworkError("x")).retryable
    assert not classify(WorkflowStep.CREATE_CONSENT, RejectedError("x")).retryable


def test_describe_error_prefers_server_message():
    assert describe_error(RejectedError("Access denied", status_code=403)) == "Access denied"
    assert describe_error(ValueError()) == "ValueError"

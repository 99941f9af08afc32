"""Unit tests for callback-style delivery: unstarted tasks, exactly-once completion, build failures."""
from __future__ import annotations

import threading

from loguru import logger

from dispatch_client.application.callback_client import CallbackClient
from dispatch_client.domain.environment import Environment
from dispatch_client.domain.errors import InvalidRequestError, InvalidResponseError, ResponseError
from dispatch_client.domain.http import Scheme
from dispatch_client.domain.resource import Resource
from dispatch_client.domain.result import Failed, Succeeded
from tests.fakes import CallbackRecorder, FakeTransport, http_metadata


class RaisingSubmitTransport:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def submit(self, request, completion):
        raise self._exc


def _resource(request) -> Resource[str]:
    return Resource(request=request, decode=lambda data: data.decode())


def test_task_is_returned_unstarted(secure_environment, custom_request):
    transport = FakeTransport(body=b"data", metadata=http_metadata(200))
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)

    assert task is not None
    assert transport.requests == []
    assert recorder.outcomes == []
    assert not recorder.event.wait(0.05)


def test_resumed_task_delivers_once_off_the_calling_thread(secure_environment, custom_request):
    transport = FakeTransport(body=b"data", metadata=http_metadata(200))
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)
    assert task is not None
    task.resume()

    assert recorder.wait() == Succeeded("data")
    assert recorder.threads[0] is not threading.current_thread()


def test_duplicate_transport_completion_is_dropped(secure_environment, custom_request):
    transport = FakeTransport(body=b"data", metadata=http_metadata(200), completions_per_task=3)
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)
    assert task is not None
    task.resume()
    recorder.wait()
    transport.tasks[0].thread.join(timeout=1.0)

    assert len(recorder.outcomes) == 1


def test_build_failure_delivers_invalid_request_once_and_returns_none(custom_request):
    environment = Environment(scheme=Scheme.SECURE, endpoint="not a host")
    transport = FakeTransport(body=b"data", metadata=http_metadata(200))
    recorder = CallbackRecorder()

    task = CallbackClient(environment, transport).execute(_resource(custom_request), recorder)

    assert task is None
    assert len(recorder.outcomes) == 1
    assert isinstance(recorder.outcomes[0], Failed)
    assert isinstance(recorder.outcomes[0].error, InvalidRequestError)
    assert transport.tasks == []


def test_submit_failure_is_delivered_as_response_error(secure_environment, custom_request):
    failure = RuntimeError("executor shut down")
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, RaisingSubmitTransport(failure)).execute(
        _resource(custom_request), recorder
    )

    assert task is None
    assert len(recorder.outcomes) == 1
    assert isinstance(recorder.outcomes[0].error, ResponseError)
    assert recorder.outcomes[0].error.underlying is failure


def test_client_exposes_environment(secure_environment):
    client = CallbackClient(secure_environment, FakeTransport())
    assert client.environment is secure_environment


class UnreadableBody(bytes):
    def __bool__(self) -> bool:
        raise RuntimeError("body cannot be inspected")


def test_foreign_metadata_still_delivers_exactly_once(secure_environment, custom_request):
    transport = FakeTransport(body=b"data", metadata=object())  # type: ignore[arg-type]
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)
    assert task is not None
    task.resume()
    outcome = recorder.wait()
    transport.tasks[0].thread.join(timeout=1.0)

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, InvalidResponseError)
    assert len(recorder.outcomes) == 1


def test_unexpected_failure_while_completing_is_still_delivered(secure_environment, custom_request):
    transport = FakeTransport(body=UnreadableBody(b"data"), metadata=http_metadata(200))
    recorder = CallbackRecorder()

    task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)
    assert task is not None
    task.resume()
    outcome = recorder.wait()
    transport.tasks[0].thread.join(timeout=1.0)

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, InvalidResponseError)
    assert len(recorder.outcomes) == 1


def test_duplicate_completion_log_carries_no_payload(secure_environment, custom_request):
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING")
    try:
        transport = FakeTransport(
            body=b"confidential-payload", metadata=http_metadata(200), completions_per_task=2
        )
        recorder = CallbackRecorder()

        task = CallbackClient(secure_environment, transport).execute(_resource(custom_request), recorder)
        assert task is not None
        task.resume()
        recorder.wait()
        transport.tasks[0].thread.join(timeout=1.0)
    finally:
        logger.remove(handler_id)

    assert any("duplicate completion dropped" in message for message in messages)
    assert all("confidential-payload" not in message for message in messages)

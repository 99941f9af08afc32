from __future__ import annotations

import pytest

from dispatch_client.domain.environment import Environment, HeaderSecret, QuerySecret
from dispatch_client.domain.http import HeaderKey, HeaderValue, Method, Scheme
from dispatch_client.domain.requestable import Requestable


@pytest.fixture()
def secure_environment() -> Environment:
    return Environment(
        scheme=Scheme.SECURE,
        endpoint="api.mock.org",
        additional_headers={"Connection": "Close"},
        port=443,
        secret=HeaderSecret(HeaderKey("X-API-KEY"), HeaderValue("abc")),
    )


@pytest.fixture()
def insecure_environment() -> Environment:
    return Environment(
        scheme=Scheme.INSECURE,
        endpoint="api.mock.org",
        additional_headers={"Connection": "Close"},
        port=80,
        secret=QuerySecret("api_key", "query-secret-value"),
    )


@pytest.fixture()
def custom_request() -> Requestable:
    return Requestable(
        path="/path",
        method=Method.POST,
        parameters=[("name", "value")],
        headers={"Content-Length": "348"},
        body=b"payload",
    )


@pytest.fixture()
def default_request() -> Requestable:
    return Requestable(path="/v1/mock")

"""
Tests for the hosting API HTTP transport.
"""

from unittest.mock import patch

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from scaffolder.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from scaffolder.transport import DEFAULT_RETRY_AFTER, HTTPTransport

BASE_URL = "https://api.github.com"


def make_transport() -> HTTPTransport:
    return HTTPTransport(base_url=BASE_URL, token="ghp_testtoken1234567890abcdef")


def make_response(
    status_code: int,
    json: object | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    request = httpx.Request("POST", f"{BASE_URL}/user/repos")
    if json is None:
        return httpx.Response(status_code, headers=headers, request=request)
    return httpx.Response(status_code, json=json, headers=headers, request=request)


def test_auth_headers_are_set() -> None:
    transport = make_transport()

    assert transport._client.headers["Authorization"] == "Bearer ghp_testtoken1234567890abcdef"
    assert transport._client.headers["Accept"] == "application/vnd.github+json"
    assert transport._client.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_request_returns_parsed_json() -> None:
    transport = make_transport()
    response = make_response(201, json={"name": "payments-api"})

    with patch.object(transport._client, "request", return_value=response) as request:
        data = transport.request("POST", "/user/repos", body={"name": "payments-api"})

    assert data == {"name": "payments-api"}
    request.assert_called_once_with("POST", "/user/repos", params=None, json={"name": "payments-api"})


def test_no_content_response_returns_empty_dict() -> None:
    transport = make_transport()

    with patch.object(transport._client, "request", return_value=make_response(204)):
        assert transport.request("DELETE", "/repos/acme/payments-api") == {}


def test_list_payload_is_wrapped() -> None:
    transport = make_transport()

    with patch.object(transport._client, "request", return_value=make_response(200, json=[{"id": 1}])):
        assert transport.request("GET", "/user/repos") == {"items": [{"id": 1}]}


@pytest.mark.parametrize(
    ("status_code", "error_class"),
    [
        (400, ValidationError),
        (401, AuthenticationError),
        (403, AuthorizationError),
        (404, NotFoundError),
        (409, ConflictError),
        (422, ValidationError),
        (500, ServerError),
        (502, ServerError),
        (503, ServerError),
    ],
)
def test_error_status_mapping(status_code: int, error_class: type) -> None:
    transport = make_transport()
    response = make_response(
        status_code,
        json={"message": "nope"},
        headers={"X-GitHub-Request-Id": "ABCD:1234"},
    )

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(error_class) as exc_info:
            transport.request("POST", "/user/repos", body={"name": "x"})

    assert exc_info.value.status_code == status_code
    assert exc_info.value.request_id == "ABCD:1234"
    assert exc_info.value.message == "nope"


def test_validation_details_are_appended_to_message() -> None:
    transport = make_transport()
    response = make_response(422, json={
        "message": "Repository creation failed.",
        "errors": [{"resource": "Repository", "code": "custom", "field": "name",
                    "message": "name already exists on this account"}],
    })

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(ValidationError) as exc_info:
            transport.request("POST", "/orgs/acme/repos", body={"name": "payments-api"})

    assert exc_info.value.message == "Repository creation failed. (name already exists on this account)"
    assert exc_info.value.retryable is False


def test_non_json_error_body() -> None:
    transport = make_transport()
    response = httpx.Response(502, content=b"<html>Bad gateway</html>", request=httpx.Request("GET", BASE_URL))

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(ServerError) as exc_info:
            transport.request("GET", "/user")

    assert exc_info.value.message == "HTTP 502"


@given(retry_after=st.integers(min_value=1, max_value=3600))
@settings(max_examples=50)
def test_rate_limit_retry_after_header(retry_after: int) -> None:
    """
    Property: Retry-After is carried on rate-limit errors

    For any 429 response with Retry-After T, the raised RateLimitedError is
    retryable and carries T.
    """
    transport = make_transport()
    response = make_response(429, json={"message": "slow down"}, headers={"Retry-After": str(retry_after)})

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(RateLimitedError) as exc_info:
            transport.request("POST", "/user/repos")

    assert exc_info.value.retry_after == retry_after
    assert exc_info.value.retryable is True


def test_exhausted_quota_403_is_rate_limited() -> None:
    transport = make_transport()
    response = make_response(
        403,
        json={"message": "API rate limit exceeded"},
        headers={"X-RateLimit-Remaining": "0"},
    )

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(RateLimitedError) as exc_info:
            transport.request("POST", "/user/repos")

    assert exc_info.value.retry_after == DEFAULT_RETRY_AFTER


def test_rate_limit_reset_header() -> None:
    transport = make_transport()
    response = make_response(429, json={"message": "slow down"}, headers={"X-RateLimit-Reset": "1700000100"})

    with patch("scaffolder.transport.time.time", return_value=1700000000):
        with patch.object(transport._client, "request", return_value=response):
            with pytest.raises(RateLimitedError) as exc_info:
                transport.request("POST", "/user/repos")

    assert exc_info.value.retry_after == 100


def test_timeout_becomes_retryable_server_error() -> None:
    transport = make_transport()

    with patch.object(transport._client, "request", side_effect=httpx.ReadTimeout("timed out")):
        with pytest.raises(ServerError) as exc_info:
            transport.request("POST", "/user/repos")

    assert exc_info.value.code == "TIMEOUT"
    assert exc_info.value.retryable is True


def test_connection_error_becomes_retryable_server_error() -> None:
    transport = make_transport()

    with patch.object(transport._client, "request", side_effect=httpx.ConnectError("refused")):
        with pytest.raises(ServerError) as exc_info:
            transport.request("GET", "/user")

    assert exc_info.value.code == "CONNECTION_ERROR"
    assert exc_info.value.retryable is True


def test_context_manager_closes_client() -> None:
    with patch.object(httpx.Client, "close") as close:
        with make_transport():
            pass

    close.assert_called_once()

"""
HTTP Transport for the hosting API.

Handles HTTP communication with the repository hosting API (GitHub REST v3)
and parses error responses into typed exceptions. Each call is a single
attempt; retries are applied one level up by ``scaffolder.retry``.
"""

import time
from typing import Any

import httpx

from scaffolder.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    HostingAPIError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from scaffolder.logging import log_http_request, log_http_response

DEFAULT_RETRY_AFTER = 60


class HTTPTransport:
    """
    HTTP transport layer for the hosting API.

    Handles:
    - Token authentication headers
    - Per-request timeouts
    - Error response parsing into typed exceptions
    - Masked request/response logging
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Access token with repo and admin:org scopes
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make a single API request.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path (e.g., "/user/repos")
            body: JSON request body (for POST/PATCH)
            params: Query parameters

        Returns:
            Parsed JSON response, or an empty dict for bodiless responses

        Raises:
            HostingAPIError: On API errors; ServerError on timeouts and
                connection failures
        """
        log_http_request(method, f"{self.base_url}{path}", body=body)
        started = time.monotonic()

        try:
            response = self._client.request(method, path, params=params, json=body)
        except httpx.TimeoutException as e:
            raise ServerError("TIMEOUT", f"{method} {path} timed out: {e}") from e
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e)) from e

        elapsed_ms = (time.monotonic() - started) * 1000

        if response.status_code >= 400:
            log_http_response(response.status_code, f"{self.base_url}{path}", elapsed_ms=elapsed_ms)
            raise self._parse_error_response(response)

        data = self._parse_body(response)
        log_http_response(response.status_code, f"{self.base_url}{path}", data, elapsed_ms)
        return data

    def _parse_body(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 204 or not response.content:
            return {}
        data = response.json()
        if isinstance(data, dict):
            return data
        return {"items": data}

    def _parse_error_response(self, response: httpx.Response) -> HostingAPIError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate HostingAPIError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        details = data.get("errors")
        if isinstance(details, list) and details:
            reasons = [
                item.get("message") or item.get("code", "")
                for item in details
                if isinstance(item, dict)
            ]
            reasons = [reason for reason in reasons if reason]
            if reasons:
                message = f"{message} ({'; '.join(reasons)})"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            return RateLimitedError(
                "RATE_LIMITED",
                message,
                self._get_retry_after(response),
                status_code,
                request_id,
            )
        elif status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, status_code, request_id)
        elif status_code == 403:
            return AuthorizationError("FORBIDDEN", message, status_code, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, status_code, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, status_code, request_id)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, status_code, request_id)
        else:
            return ValidationError("VALIDATION_FAILED", message, status_code, request_id)

    def _get_retry_after(self, response: httpx.Response) -> int:
        """Read the delay hint from Retry-After or X-RateLimit-Reset."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return int(retry_after)
            except ValueError:
                return DEFAULT_RETRY_AFTER

        reset_at = response.headers.get("X-RateLimit-Reset")
        if reset_at is not None:
            try:
                return max(0, int(reset_at) - int(time.time()))
            except ValueError:
                return DEFAULT_RETRY_AFTER

        return DEFAULT_RETRY_AFTER

"""
Hosting API client.

Aggregates the resource clients of the repository hosting API behind one
transport.
"""

from typing import Any

from scaffolder.clients import ReposClient, UsersClient
from scaffolder.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ScaffolderConfig
from scaffolder.transport import HTTPTransport


class HostingClient:
    """
    Client for the repository hosting API.

    Example:
        ```python
        from scaffolder.client import HostingClient

        with HostingClient(token="ghp_...") as hosting:
            repo = hosting.repos.create(name="payments-api", org="acme")
            print(repo.clone_url)
        ```
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the hosting client.

        Args:
            token: Access token with repo and admin:org scopes
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(base_url=base_url, token=token, timeout=timeout)

        self.repos = ReposClient(self._transport)
        self.users = UsersClient(self._transport)

    @classmethod
    def from_config(cls, config: ScaffolderConfig) -> "HostingClient":
        """Create a client from a ScaffolderConfig."""
        return cls(
            token=config.access_token,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "HostingClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

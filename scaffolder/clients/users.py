"""Users resource client."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scaffolder.transport import HTTPTransport


class UsersClient:
    """Client for the authenticated user."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def authenticated(self) -> str:
        """Return the login of the user owning the access token."""
        data = self.transport.request(method="GET", path="/user")
        return data["login"]

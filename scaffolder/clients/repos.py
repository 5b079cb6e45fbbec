"""Repositories resource client."""

from typing import TYPE_CHECKING, Any

from scaffolder.types.repos import Repository

if TYPE_CHECKING:
    from scaffolder.transport import HTTPTransport


def _parse_repository(data: dict[str, Any]) -> Repository:
    """Parse a repository payload from the hosting API."""
    return Repository(
        name=data["name"],
        full_name=data.get("full_name", data["name"]),
        clone_url=data.get("clone_url", ""),
        html_url=data.get("html_url", ""),
        private=bool(data.get("private", True)),
        default_branch=data.get("default_branch"),
    )


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        name: str,
        description: str | None = None,
        private: bool = True,
        has_issues: bool = True,
        has_wiki: bool = False,
        has_projects: bool = False,
        org: str | None = None,
    ) -> Repository:
        """
        Create a new repository.

        Uses the organisation endpoint when ``org`` is given, otherwise the
        repository is created for the authenticated user.

        Args:
            name: Repository name
            description: Optional repository description
            private: Whether the repository is private (default: True)
            has_issues: Enable issues
            has_wiki: Enable the wiki
            has_projects: Enable projects
            org: Organisation to create the repository in

        Returns:
            Repository object with clone_url, full_name, etc.

        Raises:
            HostingAPIError: On API errors (ValidationError if the name is taken)
        """
        body: dict[str, Any] = {
            "name": name,
            "private": private,
            "description": description,
            "has_issues": has_issues,
            "has_projects": has_projects,
            "has_wiki": has_wiki,
        }

        if org:
            body["org"] = org
            path = f"/orgs/{org}/repos"
        else:
            path = "/user/repos"

        data = self.transport.request(method="POST", path=path, body=body)
        return _parse_repository(data)

    def delete(self, owner: str, name: str) -> None:
        """
        Delete a repository.

        Args:
            owner: User or organisation owning the repository
            name: Repository name

        Raises:
            NotFoundError: If repository not found
            AuthorizationError: If the token may not delete repositories
        """
        self.transport.request(method="DELETE", path=f"/repos/{owner}/{name}")

"""Repository-related data models."""

from dataclasses import dataclass
from enum import Enum


class Visibility(str, Enum):
    """Requested repository visibility."""

    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"

    @property
    def is_private(self) -> bool:
        # The hosting API only offers a boolean flag; internal maps to private.
        return self is not Visibility.PUBLIC


@dataclass(frozen=True)
class RepositorySpec:
    """Repository to create on the hosting service."""

    name: str
    description: str = ""
    visibility: Visibility = Visibility.INTERNAL
    has_issues: bool = True
    has_wiki: bool = False
    has_projects: bool = False
    owner: str | None = None  # organisation identifier


@dataclass
class Repository:
    """Repository information returned by the hosting API."""

    name: str
    full_name: str
    clone_url: str
    html_url: str
    private: bool
    default_branch: str | None

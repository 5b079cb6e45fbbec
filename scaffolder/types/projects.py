"""Project scaffolding and catalog data models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

DEFAULT_REMOTE_NAME = "origin"
DEFAULT_COMMIT_MESSAGE = "chore(init): initial commit"
DEFAULT_BRANCH_NAME = "feat/initial_scaffold"


class ProjectType(str, Enum):
    APP = "app"
    LIBRARY = "library"
    INFRA_CONSTRUCT = "infra-construct"
    JAVA_APP = "java-app"


class ComponentType(str, Enum):
    SERVICE = "service"
    WEBSITE = "website"
    LIBRARY = "library"
    TOOL = "tool"


class Lifecycle(str, Enum):
    EXPERIMENTAL = "experimental"
    PRODUCTION = "production"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class ProjectSpec:
    """Project to scaffold into the working directory."""

    name: str
    project_type: ProjectType
    owner: str  # catalog group, e.g. "group:team-payments"
    author_name: str
    author_email: str
    repo_url: str = ""


@dataclass(frozen=True)
class CatalogSpec:
    """Catalog descriptor (catalog-info.yaml) to generate."""

    name: str
    owner: str
    repo_url: str = ""
    description: str | None = None
    component_type: ComponentType = ComponentType.SERVICE
    lifecycle: Lifecycle = Lifecycle.EXPERIMENTAL
    system: str = "platform"


@dataclass(frozen=True)
class LocalRepoRef:
    """A local working copy and the remote it is wired to."""

    repository_url: str
    local_path: str
    remote_name: str = DEFAULT_REMOTE_NAME
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    branch_name: str = DEFAULT_BRANCH_NAME


@dataclass
class ScaffoldOutput:
    """Result of a scaffold capability call."""

    working_dir: Path
    message: str


@dataclass
class CatalogOutput:
    """Result of a catalog capability call."""

    catalog_path: Path

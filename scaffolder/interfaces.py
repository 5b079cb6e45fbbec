"""Capability interfaces the provisioning saga is composed against."""

from pathlib import Path
from typing import Protocol

from scaffolder.types.projects import CatalogOutput, CatalogSpec, ProjectSpec, ScaffoldOutput
from scaffolder.types.repos import RepositorySpec


class RepositoryClient(Protocol):
    """Remote repository and working copy operations (see ``GitClient``)."""

    def create_repository(self, spec: RepositorySpec) -> str: ...

    def delete_repository(self, name: str, owner: str | None = None) -> None: ...

    def add_remote(self, local_path: str | Path, remote_url: str, remote_name: str = "origin") -> None: ...

    def commit_and_push(
        self,
        local_path: str | Path,
        message: str,
        branch: str | None = None,
        remote_name: str = "origin",
    ) -> str: ...


class Scaffolder(Protocol):
    """Produces project files in a working directory."""

    def scaffold(self, spec: ProjectSpec) -> ScaffoldOutput: ...


class CatalogGenerator(Protocol):
    """Writes the catalog descriptor into an existing working directory."""

    def generate_catalog(self, spec: CatalogSpec) -> CatalogOutput: ...

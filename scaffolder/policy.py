"""
Naming and ownership policy checked before any provisioning side effect.

Violations are collected rather than raised one at a time so a caller gets
every problem with its request in one response.
"""

import re
from dataclasses import dataclass

from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.types.projects import CatalogSpec, ProjectSpec
from scaffolder.types.repos import RepositorySpec, Visibility

REPOSITORY_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{2,39}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_DESCRIPTION_LENGTH = 256


@dataclass(frozen=True)
class ProvisioningPolicy:
    """Guardrails for repository and project requests."""

    organisation: str | None = None
    allow_public: bool = False
    min_project_name_length: int = 10
    owner_prefix: str = "group:"

    def validate(
        self,
        repository: RepositorySpec,
        project: ProjectSpec,
        catalog: CatalogSpec,
    ) -> list[ClassifiedError]:
        """
        Check a provisioning request.

        Args:
            repository: Repository to create
            project: Project to scaffold
            catalog: Catalog descriptor to generate

        Returns:
            One ClassifiedError per violation; empty when the request is valid
        """
        return [
            *self.validate_repository(repository),
            *self.validate_project(repository, project),
            *self.validate_catalog(repository, catalog),
        ]

    def validate_repository(self, repository: RepositorySpec) -> list[ClassifiedError]:
        errors = []

        if not is_valid_repository_name(repository.name):
            errors.append(_invalid_repository(
                f"Repository name {repository.name!r} must be kebab-case, 3-40 characters, "
                "and must not start or end with a hyphen"
            ))

        if len(repository.description) > MAX_DESCRIPTION_LENGTH:
            errors.append(_invalid_repository(
                f"Repository description exceeds {MAX_DESCRIPTION_LENGTH} characters"
            ))

        if repository.visibility is Visibility.PUBLIC and not self.allow_public:
            errors.append(_invalid_repository(
                f"Public repositories are not allowed (requested for {repository.name!r})"
            ))

        if repository.owner is not None and repository.owner != self.organisation:
            if self.organisation is None:
                errors.append(_invalid_repository(
                    f"Organisation {repository.owner!r} requested but no organisation is configured"
                ))
            else:
                errors.append(_invalid_repository(
                    f"Repositories may only be created in {self.organisation!r}, not {repository.owner!r}"
                ))

        return errors

    def validate_project(self, repository: RepositorySpec, project: ProjectSpec) -> list[ClassifiedError]:
        errors = []

        if project.name != repository.name:
            errors.append(_invalid_project(
                f"Project name {project.name!r} must match repository name {repository.name!r}"
            ))
        if len(project.name) < self.min_project_name_length:
            errors.append(_invalid_project(
                f"Project name {project.name!r} must be at least {self.min_project_name_length} characters"
            ))
        errors.extend(self._validate_owner("Project", project.owner))
        if len(project.author_name.strip()) < 3:
            errors.append(_invalid_project("Author name must be at least 3 characters"))
        if not EMAIL_PATTERN.fullmatch(project.author_email):
            errors.append(_invalid_project(f"Author email {project.author_email!r} is not a valid address"))

        return errors

    def validate_catalog(self, repository: RepositorySpec, catalog: CatalogSpec) -> list[ClassifiedError]:
        errors = []

        if catalog.name != repository.name:
            errors.append(_invalid_project(
                f"Catalog name {catalog.name!r} must match repository name {repository.name!r}"
            ))
        errors.extend(self._validate_owner("Catalog", catalog.owner))

        return errors

    def _validate_owner(self, label: str, owner: str) -> list[ClassifiedError]:
        # Malformed owners are rejected, never rewritten.
        if owner.startswith(self.owner_prefix) and len(owner) > len(self.owner_prefix):
            return []
        return [_invalid_project(
            f"{label} owner {owner!r} must start with {self.owner_prefix!r}, e.g. {self.owner_prefix}team-payments"
        )]


def is_valid_repository_name(name: str) -> bool:
    """Return True for kebab-case names without a trailing hyphen."""
    return bool(REPOSITORY_NAME_PATTERN.fullmatch(name)) and not name.endswith("-")


def _invalid_repository(message: str) -> ClassifiedError:
    return ClassifiedError(ErrorKind.INVALID_REPOSITORY, message)


def _invalid_project(message: str) -> ClassifiedError:
    return ClassifiedError(ErrorKind.INVALID_PROJECT, message)

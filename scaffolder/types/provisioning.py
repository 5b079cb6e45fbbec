"""Provisioning saga state and result models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

from scaffolder.exceptions import ClassifiedError
from scaffolder.types.projects import CatalogSpec, ProjectSpec
from scaffolder.types.repos import RepositorySpec


class SagaState(str, Enum):
    """States of the provisioning saga."""

    VALIDATING = "validating"
    CREATING_REPO = "creating_repo"
    SCAFFOLDING = "scaffolding"
    GENERATING_CATALOG = "generating_catalog"
    ATTACHING_REMOTE = "attaching_remote"
    COMMITTING = "committing"
    SUCCEEDED = "succeeded"
    ROLLING_BACK = "rolling_back"
    FAILED = "failed"


@dataclass
class ProvisioningState:
    """
    Working memory of one saga run.

    Created when the saga starts and owned by it alone. Step flags only ever
    go from False to True; rollback clears ``remote_created`` and nothing else.
    """

    repository: RepositorySpec
    project: ProjectSpec
    catalog: CatalogSpec
    state: SagaState = SagaState.VALIDATING
    remote_created: bool = False
    remote_url: str | None = None
    scaffolded: bool = False
    working_dir: Path | None = None
    catalog_written: bool = False
    catalog_path: Path | None = None
    remote_attached: bool = False
    committed: bool = False
    commit_ref: str | None = None
    pushed: bool = False
    last_error: ClassifiedError | None = None

    def mark_remote_created(self, remote_url: str) -> None:
        """Record the created remote; from here on failures roll back."""
        self.remote_url = remote_url
        self.remote_created = True


@dataclass
class ProvisioningSuccess:
    """Terminal result of a saga that reached SUCCEEDED."""

    remote_url: str
    commit_ref: str
    catalog_path: Path

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "success",
            "response": {
                "repositoryUrl": self.remote_url,
                "commitSHA": self.commit_ref,
                "catalogPath": str(self.catalog_path),
            },
            "errors": [],
        }


@dataclass
class ProvisioningFailure:
    """
    Terminal result of a saga that failed.

    ``rolled_back`` tells whether the compensating delete was attempted;
    ``rollback_error`` is set when that delete failed too.
    """

    errors: list[ClassifiedError]
    rolled_back: bool
    failed_state: SagaState
    rollback_error: ClassifiedError | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.errors:
            raise ValueError("ProvisioningFailure requires at least one error")

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "failed",
            "failedState": self.failed_state.value,
            "rollback": self.rolled_back,
            "rollbackSucceeded": self.rolled_back and self.rollback_error is None,
            "errors": [error.to_dict() for error in self.errors],
        }


ProvisioningResult = Union[ProvisioningSuccess, ProvisioningFailure]

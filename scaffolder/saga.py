"""
Provisioning saga.

Runs the fixed provisioning sequence

    validate -> create repository -> scaffold -> generate catalog
             -> attach remote -> commit and push

as one unit of work. Once the remote repository exists, any failure (or an
interruption such as ``KeyboardInterrupt``) deletes it again before the saga
finishes, so no orphaned repository is left behind. The saga never raises for
ordinary failures: it returns a ``ProvisioningSuccess`` or a
``ProvisioningFailure``.
"""

import time
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import TypeVar

from scaffolder.config import ScaffolderConfig
from scaffolder.exceptions import ClassifiedError, ErrorKind, as_classified
from scaffolder.git import GitClient
from scaffolder.guard import ProvisioningGuard
from scaffolder.interfaces import CatalogGenerator, RepositoryClient, Scaffolder
from scaffolder.logging import get_logger
from scaffolder.policy import ProvisioningPolicy
from scaffolder.projects import BackstageCatalogGenerator, TemplateScaffolder, Workspace
from scaffolder.types.projects import (
    DEFAULT_BRANCH_NAME,
    DEFAULT_COMMIT_MESSAGE,
    CatalogSpec,
    ProjectSpec,
)
from scaffolder.types.provisioning import (
    ProvisioningFailure,
    ProvisioningResult,
    ProvisioningState,
    ProvisioningSuccess,
    SagaState,
)
from scaffolder.types.repos import RepositorySpec

T = TypeVar("T")

logger = get_logger("saga")


class ProvisioningSaga:
    """
    Orchestrates repository creation, scaffolding and the initial push.

    Example:
        ```python
        from scaffolder import ProvisioningSaga, ScaffolderConfig
        from scaffolder.types import CatalogSpec, ProjectSpec, ProjectType, RepositorySpec

        saga = ProvisioningSaga.from_config(ScaffolderConfig.from_env())
        result = saga.provision(
            RepositorySpec(name="payments-api", description="Payments API"),
            ProjectSpec(
                name="payments-api",
                project_type=ProjectType.APP,
                owner="group:team-payments",
                author_name="Jane Doe",
                author_email="jane@example.com",
            ),
            CatalogSpec(name="payments-api", owner="group:team-payments"),
        )
        if result.ok:
            print(result.remote_url, result.commit_ref)
        ```
    """

    def __init__(
        self,
        git: RepositoryClient,
        scaffolder: Scaffolder,
        catalog_generator: CatalogGenerator,
        policy: ProvisioningPolicy | None = None,
        guard: ProvisioningGuard | None = None,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        branch: str = DEFAULT_BRANCH_NAME,
    ) -> None:
        """
        Initialize the saga.

        Args:
            git: Remote repository and working copy operations
            scaffolder: Scaffold capability
            catalog_generator: Catalog capability
            policy: Validation policy (default: no organisation, no public repos)
            guard: Guard shared by all sagas of the process (default: a private one)
            commit_message: Message of the initial commit
            branch: Branch the initial commit is pushed to
        """
        self.git = git
        self.scaffolder = scaffolder
        self.catalog_generator = catalog_generator
        self.policy = policy or ProvisioningPolicy()
        self.guard = guard or ProvisioningGuard()
        self.commit_message = commit_message
        self.branch = branch

    @classmethod
    def from_config(
        cls,
        config: ScaffolderConfig,
        guard: ProvisioningGuard | None = None,
    ) -> "ProvisioningSaga":
        """Build a saga with the default GitHub client and template capabilities."""
        workspace = Workspace(config.workspace_root)
        return cls(
            git=GitClient.from_config(config),
            scaffolder=TemplateScaffolder(workspace),
            catalog_generator=BackstageCatalogGenerator(workspace),
            policy=ProvisioningPolicy(
                organisation=config.organisation,
                allow_public=config.allow_public,
            ),
            guard=guard,
        )

    def provision(
        self,
        repository: RepositorySpec,
        project: ProjectSpec,
        catalog: CatalogSpec,
    ) -> ProvisioningResult:
        """
        Provision a repository and push the scaffolded project to it.

        Args:
            repository: Repository to create
            project: Project to scaffold (an empty repo_url is filled in)
            catalog: Catalog descriptor to generate (an empty repo_url is filled in)

        Returns:
            ProvisioningSuccess, or ProvisioningFailure with the classified
            errors and whether the created repository was rolled back
        """
        try:
            with self.guard.hold(repository.name):
                return self._run(ProvisioningState(repository, project, catalog))
        except ClassifiedError as error:
            # _run reports its own failures; only the guard raises here.
            return ProvisioningFailure(errors=[error], rolled_back=False, failed_state=SagaState.VALIDATING)

    def _run(self, state: ProvisioningState) -> ProvisioningResult:
        started = time.monotonic()
        name = state.repository.name
        logger.info(f"Provisioning {name}")

        errors = self.policy.validate(state.repository, state.project, state.catalog)
        if errors:
            for error in errors:
                logger.warning(f"{name}: {error}")
            return self._fail(state, errors)

        try:
            self._transition(state, SagaState.CREATING_REPO)
            remote_url = self._call(
                lambda: self.git.create_repository(state.repository),
                ErrorKind.REPOSITORY_CREATION_FAILED,
            )
            state.mark_remote_created(remote_url)

            project = _with_repo_url(state.project, remote_url)
            catalog = _with_repo_url(state.catalog, remote_url)

            self._transition(state, SagaState.SCAFFOLDING)
            scaffold = self._call(lambda: self.scaffolder.scaffold(project), ErrorKind.SCAFFOLD_FAILED)
            state.working_dir = Path(scaffold.working_dir)
            state.scaffolded = True

            self._transition(state, SagaState.GENERATING_CATALOG)
            output = self._call(
                lambda: self.catalog_generator.generate_catalog(catalog),
                ErrorKind.CATALOG_GENERATION_FAILED,
            )
            state.catalog_path = Path(output.catalog_path)
            state.catalog_written = True

            self._transition(state, SagaState.ATTACHING_REMOTE)
            self._call(
                lambda: self.git.add_remote(state.working_dir, remote_url),
                ErrorKind.INVALID_REMOTE_ORIGIN,
            )
            state.remote_attached = True

            self._transition(state, SagaState.COMMITTING)
            commit_ref = self._call(
                lambda: self.git.commit_and_push(state.working_dir, self.commit_message, self.branch),
                ErrorKind.COMMIT_FAILED,
            )
            state.commit_ref = commit_ref
            state.committed = True
            state.pushed = True
        except ClassifiedError as error:
            state.last_error = error
            logger.error(f"{name}: {state.state.value} failed: {error}")
            if state.remote_created:
                return self._roll_back(state, error)
            return self._fail(state, [error])
        except BaseException:
            # Interrupted mid-run: the repository must still not be orphaned.
            if state.remote_created:
                logger.warning(f"{name}: interrupted during {state.state.value}, rolling back")
                self._roll_back(state, None)
            raise

        self._transition(state, SagaState.SUCCEEDED)
        logger.info(f"Provisioned {name} in {time.monotonic() - started:.2f}s")
        return ProvisioningSuccess(
            remote_url=remote_url,
            commit_ref=commit_ref,
            catalog_path=state.catalog_path,
        )

    def _call(self, step: Callable[[], T], kind: ErrorKind) -> T:
        """Run a step, classifying anything unclassified as ``kind``."""
        try:
            return step()
        except ClassifiedError:
            raise
        except Exception as e:
            raise as_classified(e, kind) from e

    def _roll_back(self, state: ProvisioningState, error: ClassifiedError | None) -> ProvisioningFailure:
        failed_state = state.state
        self._transition(state, SagaState.ROLLING_BACK)

        rollback_error = None
        try:
            self.git.delete_repository(state.repository.name, state.repository.owner)
            state.remote_created = False
            logger.info(f"{state.repository.name}: rolled back remote repository")
        except Exception as e:
            rollback_error = as_classified(e, ErrorKind.REPOSITORY_DELETION_FAILED)
            logger.error(f"{state.repository.name}: rollback failed, repository may be orphaned: {rollback_error}")

        errors = [error] if error is not None else []
        if rollback_error is not None:
            errors.append(rollback_error)
        if not errors:
            errors.append(ClassifiedError(
                ErrorKind.GENERAL_TOOL_FAILURE,
                f"Provisioning of {state.repository.name} was interrupted",
            ))

        self._transition(state, SagaState.FAILED)
        return ProvisioningFailure(
            errors=errors,
            rolled_back=True,
            failed_state=failed_state,
            rollback_error=rollback_error,
        )

    def _fail(self, state: ProvisioningState, errors: list[ClassifiedError]) -> ProvisioningFailure:
        failed_state = state.state
        self._transition(state, SagaState.FAILED)
        return ProvisioningFailure(errors=errors, rolled_back=False, failed_state=failed_state)

    def _transition(self, state: ProvisioningState, target: SagaState) -> None:
        logger.info(f"{state.repository.name}: {state.state.value} -> {target.value}")
        state.state = target


def _with_repo_url(spec: T, remote_url: str) -> T:
    if getattr(spec, "repo_url", None):
        return spec
    return replace(spec, repo_url=remote_url)

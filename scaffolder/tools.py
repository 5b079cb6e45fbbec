"""
Named tools over the provisioning steps.

Thin drivers (agents, scripts, sockets) call the individual steps, or the
whole saga, by name with plain dict payloads using camelCase keys:

    tools = ScaffolderTools.from_config(ScaffolderConfig.from_env())
    response = tools.invoke("create_repository", {"name": "payments-api"})

Every failure comes back as a ``ToolResponse`` with status "failure" and
classified errors; ``invoke`` never raises for a failing tool.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from scaffolder.config import ScaffolderConfig
from scaffolder.exceptions import ClassifiedError, ErrorKind, as_classified
from scaffolder.guard import ProvisioningGuard
from scaffolder.interfaces import CatalogGenerator, RepositoryClient, Scaffolder
from scaffolder.logging import get_logger
from scaffolder.saga import ProvisioningSaga
from scaffolder.types.projects import (
    DEFAULT_BRANCH_NAME,
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_REMOTE_NAME,
    CatalogSpec,
    ComponentType,
    Lifecycle,
    LocalRepoRef,
    ProjectSpec,
    ProjectType,
)
from scaffolder.types.repos import RepositorySpec, Visibility

logger = get_logger("tools")

SUCCESS = "success"
FAILURE = "failure"


@dataclass
class ToolResponse:
    """Outcome of one tool invocation."""

    status: str
    body: dict[str, Any] = field(default_factory=dict)
    errors: list[ClassifiedError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "body": self.body,
            "errors": [error.to_dict() for error in self.errors],
        }


def _require(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        raise ValueError(f"Missing required field {key!r}")
    return value


def _visibility(value: Any) -> Visibility:
    # Boolean form: true means private.
    if isinstance(value, bool):
        return Visibility.PRIVATE if value else Visibility.PUBLIC
    if value is None:
        return Visibility.INTERNAL
    return Visibility(str(value).lower())


def parse_repository_spec(payload: dict[str, Any]) -> RepositorySpec:
    return RepositorySpec(
        name=_require(payload, "name"),
        description=payload.get("description") or "",
        visibility=_visibility(payload.get("visibility")),
        has_issues=bool(payload.get("hasIssues", True)),
        has_wiki=bool(payload.get("hasWiki", False)),
        has_projects=bool(payload.get("hasProjects", False)),
        owner=payload.get("organisation") or None,
    )


def parse_project_spec(payload: dict[str, Any]) -> ProjectSpec:
    return ProjectSpec(
        name=_require(payload, "name"),
        project_type=ProjectType(_require(payload, "type")),
        owner=_require(payload, "owner"),
        author_name=_require(payload, "authorName"),
        author_email=_require(payload, "authorEmail"),
        repo_url=payload.get("repoUrl") or "",
    )


def parse_catalog_spec(payload: dict[str, Any]) -> CatalogSpec:
    return CatalogSpec(
        name=_require(payload, "name"),
        owner=_require(payload, "owner"),
        repo_url=payload.get("repoUrl") or "",
        description=payload.get("description"),
        component_type=ComponentType(payload.get("type") or ComponentType.SERVICE.value),
        lifecycle=Lifecycle(payload.get("lifecycle") or Lifecycle.EXPERIMENTAL.value),
        system=payload.get("system") or "platform",
    )


def parse_local_repo(payload: dict[str, Any], require_url: bool = True) -> LocalRepoRef:
    return LocalRepoRef(
        repository_url=_require(payload, "repositoryUrl") if require_url else payload.get("repositoryUrl", ""),
        local_path=_require(payload, "localPath"),
        remote_name=payload.get("remoteName") or DEFAULT_REMOTE_NAME,
        commit_message=payload.get("message") or DEFAULT_COMMIT_MESSAGE,
        branch_name=payload.get("branchName") or DEFAULT_BRANCH_NAME,
    )


class ScaffolderTools:
    """
    Dispatches named tool calls to the git client, capabilities and saga.

    Example:
        ```python
        tools = ScaffolderTools(git, scaffolder, catalog_generator)
        response = tools.invoke("checkin_files", {
            "repositoryUrl": "https://github.com/acme/payments-api.git",
            "localPath": "/tmp/scaffolder/payments-api",
        })
        if response.ok:
            print(response.body["commitSHA"])
        ```
    """

    def __init__(
        self,
        git: RepositoryClient,
        scaffolder: Scaffolder,
        catalog_generator: CatalogGenerator,
        saga: ProvisioningSaga | None = None,
    ) -> None:
        self.git = git
        self.scaffolder = scaffolder
        self.catalog_generator = catalog_generator
        self.saga = saga or ProvisioningSaga(git, scaffolder, catalog_generator)
        self._tools: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "create_repository": self.create_repository,
            "delete_repository": self.delete_repository,
            "add_remote_origin": self.add_remote_origin,
            "checkin_files": self.checkin_files,
            "scaffold_project": self.scaffold_project,
            "generate_catalog": self.generate_catalog,
        }

    @classmethod
    def from_config(
        cls,
        config: ScaffolderConfig,
        guard: ProvisioningGuard | None = None,
    ) -> "ScaffolderTools":
        saga = ProvisioningSaga.from_config(config, guard=guard)
        return cls(saga.git, saga.scaffolder, saga.catalog_generator, saga)

    @property
    def names(self) -> list[str]:
        return [*self._tools, "provision"]

    def invoke(self, name: str, payload: dict[str, Any] | None = None) -> ToolResponse:
        """
        Run the tool called ``name``.

        Args:
            name: Tool name (see ``names``)
            payload: Tool arguments with camelCase keys

        Returns:
            ToolResponse; failures carry classified errors
        """
        payload = payload or {}
        if name == "provision":
            return self.provision(payload)

        handler = self._tools.get(name)
        if handler is None:
            return self._failure(name, ClassifiedError(ErrorKind.GENERAL_TOOL_FAILURE, f"Unknown tool {name!r}"))

        try:
            body = handler(payload)
        except Exception as e:
            return self._failure(name, as_classified(e))
        return ToolResponse(status=SUCCESS, body=body)

    def provision(self, payload: dict[str, Any]) -> ToolResponse:
        """Run the full saga from ``repository``, ``project`` and ``catalog`` payloads."""
        try:
            repository = parse_repository_spec(_require(payload, "repository"))
            project = parse_project_spec(_require(payload, "project"))
            catalog = parse_catalog_spec(_require(payload, "catalog"))
        except Exception as e:
            return self._failure("provision", as_classified(e))

        result = self.saga.provision(repository, project, catalog)
        if result.ok:
            return ToolResponse(status=SUCCESS, body=result.to_dict()["response"])

        body = result.to_dict()
        del body["errors"]
        return ToolResponse(status=FAILURE, body=body, errors=list(result.errors))

    def create_repository(self, payload: dict[str, Any]) -> dict[str, Any]:
        spec = parse_repository_spec(payload)
        return {"repositoryUrl": self.git.create_repository(spec)}

    def delete_repository(self, payload: dict[str, Any]) -> dict[str, Any]:
        name = _require(payload, "name")
        self.git.delete_repository(name, payload.get("owner") or None)
        return {"name": name, "deleted": True}

    def add_remote_origin(self, payload: dict[str, Any]) -> dict[str, Any]:
        ref = parse_local_repo(payload)
        self.git.add_remote(ref.local_path, ref.repository_url, ref.remote_name)
        return {"localPath": ref.local_path, "remoteName": ref.remote_name}

    def checkin_files(self, payload: dict[str, Any]) -> dict[str, Any]:
        ref = parse_local_repo(payload, require_url=False)
        sha = self.git.commit_and_push(ref.local_path, ref.commit_message, ref.branch_name, ref.remote_name)
        return {"commitSHA": sha, "branchName": ref.branch_name}

    def scaffold_project(self, payload: dict[str, Any]) -> dict[str, Any]:
        output = self.scaffolder.scaffold(parse_project_spec(payload))
        return {"projectPath": str(Path(output.working_dir)), "message": output.message}

    def generate_catalog(self, payload: dict[str, Any]) -> dict[str, Any]:
        output = self.catalog_generator.generate_catalog(parse_catalog_spec(payload))
        return {"catalogPath": str(Path(output.catalog_path))}

    def _failure(self, name: str, error: ClassifiedError) -> ToolResponse:
        logger.warning(f"Tool {name} failed: {error}")
        return ToolResponse(status=FAILURE, errors=[error])

"""
Git client for repository provisioning.

Combines the hosting API (create/delete repositories) with local git
primitives (init, remote, branch, commit, push). Every operation either
succeeds or raises exactly one ``ClassifiedError``; raw transport and
subprocess errors only ever appear as its ``cause``.

Local operations shell out to the ``git`` executable through ``GitRunner`` so
tests can patch a single seam. Push authentication is injected through an
inline credential helper that reads environment variables, so tokens never
show up in process arguments or logs.
"""

import os
import re
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from scaffolder.client import HostingClient
from scaffolder.config import ScaffolderConfig
from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.logging import get_logger, log_git_command, mask_sensitive_data
from scaffolder.retry import RetryPolicy
from scaffolder.types.projects import DEFAULT_BRANCH_NAME, DEFAULT_REMOTE_NAME
from scaffolder.types.repos import RepositorySpec

GIT_URL_PATTERN = re.compile(r"^(git@|https://)")
GIT_MARKER = ".git"
DEFAULT_INITIAL_BRANCH = "main"

_USERNAME_ENV = "SCAFFOLDER_GIT_USERNAME"
_PASSWORD_ENV = "SCAFFOLDER_GIT_PASSWORD"
_CREDENTIAL_HELPER = (
    "!f() { test \"$1\" = get || return 0; "
    f"echo \"username=${{{_USERNAME_ENV}}}\"; "
    f"echo \"password=${{{_PASSWORD_ENV}}}\"; "
    "}; f"
)

logger = get_logger("git")


@dataclass(frozen=True)
class GitCredentials:
    """Username/password pair presented to the remote on push."""

    username: str
    password: str = ""


class TokenCredentials:
    """Present an access token as the username with an empty password."""

    def __init__(self, token: str) -> None:
        self._token = token

    def __call__(self) -> GitCredentials:
        return GitCredentials(username=self._token, password="")


@dataclass(frozen=True)
class GitIdentity:
    """Committer identity used for scaffold commits."""

    name: str = "Scaffolder AI"
    email: str = "scaffolder-ai@users.noreply.github.com"


class GitCommandError(Exception):
    """A git invocation that failed or could not be started."""

    def __init__(self, args: Sequence[str], returncode: int | None, stderr: str) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = mask_sensitive_data(stderr.strip())
        command = mask_sensitive_data(" ".join(["git", *args]))
        detail = f"`{command}` failed"
        if returncode is not None:
            detail = f"{detail} with exit code {returncode}"
        if self.stderr:
            detail = f"{detail}: {self.stderr}"
        super().__init__(detail)


class GitRunner:
    """Runs git commands in a working directory."""

    def __init__(self, executable: str = "git", timeout: float | None = 120.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        cwd: str | Path,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess:
        """
        Run ``git <args>`` in ``cwd``.

        Args:
            args: Arguments after the executable name
            cwd: Working directory
            env: Full environment for the child process (default: inherited)

        Returns:
            The completed process with captured text output

        Raises:
            GitCommandError: If git exits non-zero, times out or cannot start
        """
        log_git_command(args, str(cwd))
        try:
            return subprocess.run(
                [self.executable, *args],
                cwd=cwd,
                env=env,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(args, e.returncode, e.stderr or "") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, None, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise GitCommandError(args, None, str(e)) from e


def is_git_repository(path: str | Path) -> bool:
    """Return True if ``path`` holds a ``.git`` marker."""
    return (Path(path) / GIT_MARKER).exists()


def _classify_remote(kind: ErrorKind, message: str, error: Exception) -> ClassifiedError:
    """Classify a hosting API failure, keeping its retry hints."""
    return ClassifiedError(
        kind,
        message,
        cause=error,
        retryable=getattr(error, "retryable", False),
        retry_after=getattr(error, "retry_after", None),
    )


class GitClient:
    """
    Remote repository and local working copy operations.

    Example:
        ```python
        from scaffolder.config import ScaffolderConfig
        from scaffolder.git import GitClient
        from scaffolder.types import RepositorySpec

        git = GitClient.from_config(ScaffolderConfig.from_env())
        url = git.create_repository(RepositorySpec(name="payments-api"))
        git.add_remote("/tmp/scaffolder/payments-api", url)
        sha = git.commit_and_push("/tmp/scaffolder/payments-api", "chore(init): initial commit")
        ```
    """

    def __init__(
        self,
        hosting: HostingClient,
        organisation: str | None = None,
        credentials: Callable[[], GitCredentials] | None = None,
        retry_policy: RetryPolicy | None = None,
        identity: GitIdentity | None = None,
        runner: GitRunner | None = None,
    ) -> None:
        """
        Initialize the git client.

        Args:
            hosting: Hosting API client used for create/delete
            organisation: Organisation to create repositories in (None: user account)
            credentials: Source of push credentials (None: git's own helpers)
            retry_policy: Retry policy for hosting calls (default: 2 retries)
            identity: Committer identity (default: the service identity)
            runner: Git command runner
        """
        self.hosting = hosting
        self.organisation = organisation or None
        self.credentials = credentials
        self.retry_policy = retry_policy or RetryPolicy()
        self.identity = identity or GitIdentity()
        self.runner = runner or GitRunner()

    @classmethod
    def from_config(cls, config: ScaffolderConfig) -> "GitClient":
        """Create a git client, its hosting client and push credentials from config."""
        return cls(
            hosting=HostingClient.from_config(config),
            organisation=config.organisation,
            credentials=TokenCredentials(config.access_token),
            retry_policy=RetryPolicy(config.retry),
        )

    def close(self) -> None:
        self.hosting.close()

    def __enter__(self) -> "GitClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Hosting API
    # ------------------------------------------------------------------

    def create_repository(self, spec: RepositorySpec) -> str:
        """
        Create a repository on the hosting service.

        Args:
            spec: Repository to create

        Returns:
            The repository clone URL

        Raises:
            ClassifiedError: REPOSITORY_CREATION_FAILED after retries
        """

        def attempt() -> str:
            try:
                repo = self.hosting.repos.create(
                    name=spec.name,
                    description=spec.description,
                    private=spec.visibility.is_private,
                    has_issues=spec.has_issues,
                    has_wiki=spec.has_wiki,
                    has_projects=spec.has_projects,
                    org=self.organisation,
                )
            except Exception as e:
                raise _classify_remote(
                    ErrorKind.REPOSITORY_CREATION_FAILED,
                    f"Failed to create repository {spec.name}",
                    e,
                ) from e

            if not repo.clone_url:
                raise ClassifiedError(
                    ErrorKind.REPOSITORY_CREATION_FAILED,
                    f"Repository {spec.name} was created without a clone URL",
                )
            return repo.clone_url

        clone_url = self.retry_policy.run(attempt, f"create repository {spec.name}")
        logger.info(f"Created repository {spec.name}: {mask_sensitive_data(clone_url)}")
        return clone_url

    def delete_repository(self, name: str, owner: str | None = None) -> None:
        """
        Delete a repository on the hosting service.

        Args:
            name: Repository name
            owner: User or organisation (default: configured organisation,
                then the authenticated user)

        Raises:
            ClassifiedError: REPOSITORY_DELETION_FAILED after retries
        """

        def attempt() -> None:
            try:
                target = owner or self.organisation or self.hosting.users.authenticated()
                self.hosting.repos.delete(target, name)
            except Exception as e:
                raise _classify_remote(
                    ErrorKind.REPOSITORY_DELETION_FAILED,
                    f"Failed to delete repository {owner or self.organisation or ''}/{name}",
                    e,
                ) from e

        self.retry_policy.run(attempt, f"delete repository {name}")
        logger.info(f"Deleted repository {name}")

    # ------------------------------------------------------------------
    # Local working copy
    # ------------------------------------------------------------------

    def add_remote(
        self,
        local_path: str | Path,
        remote_url: str,
        remote_name: str = DEFAULT_REMOTE_NAME,
    ) -> None:
        """
        Attach a remote to a local working copy, initialising it if needed.

        Args:
            local_path: Working directory
            remote_url: Remote URL (must start with git@ or https://)
            remote_name: Remote name (default: "origin")

        Raises:
            ClassifiedError: INVALID_REMOTE for a malformed URL (nothing is
                touched on disk), INVALID_REMOTE_ORIGIN if init/attach fails
        """
        if not GIT_URL_PATTERN.match(remote_url):
            raise ClassifiedError(
                ErrorKind.INVALID_REMOTE,
                f"Invalid git remote URL: {mask_sensitive_data(remote_url)}",
            )

        path = Path(local_path)
        try:
            if not is_git_repository(path):
                self.runner.run(["init", f"--initial-branch={DEFAULT_INITIAL_BRANCH}"], path)
            self.runner.run(["remote", "add", remote_name, remote_url], path)
        except ClassifiedError:
            raise
        except (GitCommandError, OSError) as e:
            raise ClassifiedError(
                ErrorKind.INVALID_REMOTE_ORIGIN,
                f"Failed to initialise git repository and add remote {remote_name} in {path}",
                cause=e,
            ) from e

        logger.info(f"Attached remote {remote_name} to {path}")

    def commit_and_push(
        self,
        local_path: str | Path,
        message: str,
        branch: str | None = None,
        remote_name: str = DEFAULT_REMOTE_NAME,
    ) -> str:
        """
        Commit everything in the working copy and push it on a new branch.

        The working copy must already be a git repository; this never
        initialises one. Steps run strictly in order and the first failure
        aborts the rest.

        Args:
            local_path: Working directory
            message: Commit message
            branch: Branch to create and push (default: "feat/initial_scaffold")
            remote_name: Remote to push to (default: "origin")

        Returns:
            The SHA of the created commit

        Raises:
            ClassifiedError: INVALID_REPOSITORY_FOLDER, INVALID_BRANCH,
                COMMIT_FAILED or PUSH_FAILED
        """
        branch_name = branch or DEFAULT_BRANCH_NAME
        path = Path(local_path)

        if not is_git_repository(path):
            raise ClassifiedError(
                ErrorKind.INVALID_REPOSITORY_FOLDER,
                f"Commit and push: {path} is not a git repository",
            )

        self._step(
            ErrorKind.INVALID_BRANCH,
            f"Failed to create and checkout branch {branch_name}",
            ["checkout", "-b", branch_name],
            path,
        )

        self._step(ErrorKind.COMMIT_FAILED, "Failed to set committer name", ["config", "user.name", self.identity.name], path)
        self._step(ErrorKind.COMMIT_FAILED, "Failed to set committer email", ["config", "user.email", self.identity.email], path)
        self._step(ErrorKind.COMMIT_FAILED, "Failed to stage files for commit", ["add", "--all"], path)

        self._step(ErrorKind.COMMIT_FAILED, "Failed to commit files", ["commit", "-m", message], path)
        head = self._step(ErrorKind.COMMIT_FAILED, "Failed to resolve the new commit", ["rev-parse", "HEAD"], path)
        commit_sha = head.stdout.strip()

        try:
            env = self._push_env()
        except Exception as e:
            raise ClassifiedError(ErrorKind.PUSH_FAILED, "Failed to obtain push credentials", cause=e) from e

        self._step(
            ErrorKind.PUSH_FAILED,
            f"Failed to push {branch_name} to {remote_name}",
            [*self._credential_args(), "push", "--set-upstream", remote_name, branch_name],
            path,
            env=env,
        )

        logger.info(f"Pushed {branch_name} ({commit_sha[:12]}) to {remote_name} from {path}")
        return commit_sha

    def _step(
        self,
        kind: ErrorKind,
        message: str,
        args: Sequence[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess:
        try:
            return self.runner.run(args, cwd, env=env)
        except GitCommandError as e:
            raise ClassifiedError(kind, message, cause=e) from e

    def _credential_args(self) -> list[str]:
        if self.credentials is None:
            return []
        # The empty value clears inherited helpers so only ours answers.
        return ["-c", "credential.helper=", "-c", f"credential.helper={_CREDENTIAL_HELPER}"]

    def _push_env(self) -> dict[str, str] | None:
        if self.credentials is None:
            return None

        credentials = self.credentials()
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        env[_USERNAME_ENV] = credentials.username
        env[_PASSWORD_ENV] = credentials.password
        return env

"""Scaffolder exception classes.

Two families live here:

- ``ClassifiedError`` with its closed ``ErrorKind`` set. This is the only error
  type that leaves the git/hosting layer; callers branch on ``kind`` and
  ``retryable``.
- ``HostingAPIError`` and subclasses, raised by the HTTP transport. They are
  internal to the git client, which turns them into the ``cause`` of a
  ``ClassifiedError``.
"""

from enum import IntEnum


class ErrorKind(IntEnum):
    """Stable failure classes for git, hosting and capability operations."""

    GENERAL_TOOL_FAILURE = 1000
    INVALID_REPOSITORY = 1001
    REPOSITORY_CREATION_FAILED = 1002
    REPOSITORY_DELETION_FAILED = 1003
    PUSH_FAILED = 1004
    PROVISIONING_IN_PROGRESS = 1005
    INVALID_REPOSITORY_FOLDER = 2001
    INVALID_REMOTE = 2002
    INVALID_REMOTE_ORIGIN = 2003
    INVALID_BRANCH = 2004
    COMMIT_FAILED = 2005
    SCAFFOLD_FAILED = 3001
    CATALOG_GENERATION_FAILED = 3002
    INVALID_PROJECT = 3003


class ClassifiedError(Exception):
    """A failure tagged with an ``ErrorKind``.

    Args:
        kind: The most specific applicable failure class
        message: Human readable description of what failed
        cause: The underlying exception, if any
        retryable: Whether retrying the same call may succeed
        retry_after: Server supplied delay hint in seconds (rate limiting)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: BaseException | None = None,
        retryable: bool = False,
        retry_after: float | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.cause = cause
        self.retryable = retryable
        self.retry_after = retry_after
        detail = f"[{kind.name}] {message}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, object]:
        """Render the error for the provisioning response contract."""
        return {
            "code": self.kind.name,
            "id": int(self.kind),
            "message": self.message,
            "retryable": self.retryable,
        }


def as_classified(
    error: BaseException,
    kind: ErrorKind = ErrorKind.GENERAL_TOOL_FAILURE,
    message: str | None = None,
) -> ClassifiedError:
    """
    Wrap an error at a capability boundary.

    An error that is already classified is returned as is, so its kind and
    message stay visible to the caller. Anything else collapses to ``kind``.

    Args:
        error: The exception to wrap
        kind: Kind to use for unclassified errors
        message: Message to use for unclassified errors (default: str(error))

    Returns:
        A ClassifiedError
    """
    if isinstance(error, ClassifiedError):
        return error
    return ClassifiedError(kind, message or str(error) or type(error).__name__, cause=error)


class ConfigurationError(Exception):
    """Raised when scaffolder configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"[CONFIGURATION_ERROR] {message}")


class HostingAPIError(Exception):
    """Base exception for hosting API responses and transport failures."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")

    @property
    def retryable(self) -> bool:
        return False


class AuthenticationError(HostingAPIError):
    """Raised when the access token is missing or rejected."""

    pass


class AuthorizationError(HostingAPIError):
    """Raised when the token lacks the required scopes."""

    pass


class NotFoundError(HostingAPIError):
    """Raised when a repository, organisation or user is not found."""

    pass


class ConflictError(HostingAPIError):
    """Raised on conflicting state."""

    pass


class ValidationError(HostingAPIError):
    """Raised on rejected request payloads (400, 422)."""

    pass


class RateLimitedError(HostingAPIError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, status_code, request_id)
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        return True


class ServerError(HostingAPIError):
    """Raised on server errors (5xx), timeouts and connection failures."""

    @property
    def retryable(self) -> bool:
        return True

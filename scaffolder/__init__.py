"""Scaffolder - provision scaffolded repositories on GitHub."""

from scaffolder.client import HostingClient
from scaffolder.config import ScaffolderConfig
from scaffolder.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ClassifiedError,
    ConfigurationError,
    ConflictError,
    ErrorKind,
    HostingAPIError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
    as_classified,
)
from scaffolder.git import GitClient, GitCredentials, GitIdentity, TokenCredentials
from scaffolder.guard import ProvisioningGuard
from scaffolder.logging import configure_logging, get_logger
from scaffolder.policy import ProvisioningPolicy
from scaffolder.projects import BackstageCatalogGenerator, TemplateScaffolder, Workspace
from scaffolder.retry import RetryConfig, RetryPolicy
from scaffolder.saga import ProvisioningSaga
from scaffolder.tools import ScaffolderTools, ToolResponse
from scaffolder.transport import HTTPTransport

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Saga
    "ProvisioningSaga",
    "ProvisioningGuard",
    "ProvisioningPolicy",
    # Clients
    "GitClient",
    "GitCredentials",
    "GitIdentity",
    "TokenCredentials",
    "HostingClient",
    # Capabilities
    "Workspace",
    "TemplateScaffolder",
    "BackstageCatalogGenerator",
    # Tools
    "ScaffolderTools",
    "ToolResponse",
    # Configuration
    "ScaffolderConfig",
    # Exceptions
    "ErrorKind",
    "ClassifiedError",
    "as_classified",
    "ConfigurationError",
    "HostingAPIError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    # Transport and retry
    "HTTPTransport",
    "RetryConfig",
    "RetryPolicy",
    # Logging
    "configure_logging",
    "get_logger",
]

"""
Scaffolder configuration.

Configuration is an explicit value passed into constructors; nothing reads it
from global state after start-up. It can be built directly, from environment
variables, or from YAML files layered per environment.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from scaffolder.exceptions import ConfigurationError
from scaffolder.retry import RetryConfig

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_WORKSPACE_ROOT = "/tmp/scaffolder"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ScaffolderConfig:
    """Credentials, organisation identity and runtime settings."""

    access_token: str
    organisation: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    workspace_root: str = DEFAULT_WORKSPACE_ROOT
    allow_public: bool = False
    retry: RetryConfig = field(default_factory=RetryConfig)

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ConfigurationError("access_token is required")
        # An empty organisation means repositories are created for the user.
        if self.organisation == "":
            object.__setattr__(self, "organisation", None)

    @classmethod
    def from_env(cls) -> "ScaffolderConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITHUB_ACCESS_TOKEN: Access token with repo and admin:org scopes (required)
            GITHUB_ORGANISATION: Organisation to create repositories in (optional)
            GITHUB_API_URL: API base URL (optional, default: https://api.github.com)
            SCAFFOLDER_WORKSPACE: Root directory for working copies (optional)
            SCAFFOLDER_ALLOW_PUBLIC: Allow public repositories (optional, default: false)

        Returns:
            Configured ScaffolderConfig instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        token = os.environ.get("GITHUB_ACCESS_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_ACCESS_TOKEN environment variable not set")

        return _apply_env(cls(access_token=token))

    @classmethod
    def load(cls, config_dir: str | Path, environment: str | None = None) -> "ScaffolderConfig":
        """
        Load configuration files, then apply environment overrides.

        Reads ``default.yaml`` followed by ``<environment>.yaml`` from
        ``config_dir``; missing files are skipped and later values win.

        Args:
            config_dir: Directory holding the YAML files
            environment: Environment name (default: $ENVIRONMENT or "development")

        Returns:
            Configured ScaffolderConfig instance

        Raises:
            ConfigurationError: On unreadable files, unknown keys or a missing token
        """
        environment = environment or os.environ.get("ENVIRONMENT", "development")
        config_dir = Path(config_dir)

        values: dict[str, Any] = {}
        for file_name in ("default.yaml", f"{environment}.yaml"):
            values.update(_read_yaml(config_dir / file_name))

        token = os.environ.get("GITHUB_ACCESS_TOKEN") or values.pop("access_token", "")
        values.pop("access_token", None)
        if not token:
            raise ConfigurationError("access_token is not configured")

        retry_values = values.pop("retry", None) or {}
        allowed = {f.name for f in fields(RetryConfig)}
        unknown = set(retry_values) - allowed
        if unknown:
            raise ConfigurationError(f"Unknown retry settings: {', '.join(sorted(unknown))}")

        return _apply_env(cls(access_token=token, retry=RetryConfig(**retry_values), **values))


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")

    # Files use the nested layout {github: {...}, scaffolder: {...}}
    flat: dict[str, Any] = {}
    for section in ("github", "scaffolder"):
        flat.update(data.pop(section, None) or {})
    flat.update(data)

    allowed = {f.name for f in fields(ScaffolderConfig)}
    unknown = set(flat) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown settings in {path}: {', '.join(sorted(unknown))}")
    return flat


def _apply_env(config: ScaffolderConfig) -> ScaffolderConfig:
    overrides: dict[str, Any] = {}

    if "GITHUB_ORGANISATION" in os.environ:
        overrides["organisation"] = os.environ["GITHUB_ORGANISATION"] or None
    if os.environ.get("GITHUB_API_URL"):
        overrides["base_url"] = os.environ["GITHUB_API_URL"]
    if os.environ.get("SCAFFOLDER_WORKSPACE"):
        overrides["workspace_root"] = os.environ["SCAFFOLDER_WORKSPACE"]
    if "SCAFFOLDER_ALLOW_PUBLIC" in os.environ:
        overrides["allow_public"] = os.environ["SCAFFOLDER_ALLOW_PUBLIC"].lower() in _TRUE_VALUES

    if not overrides:
        return config
    return replace(config, **overrides)

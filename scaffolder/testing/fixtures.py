"""
Pytest fixtures for scaffolder testing.

Provides common fixtures for testing code that provisions repositories.
"""

from collections.abc import Generator
from typing import Any

import pytest

from scaffolder.guard import ProvisioningGuard
from scaffolder.policy import ProvisioningPolicy
from scaffolder.saga import ProvisioningSaga
from scaffolder.testing.mock import MockCatalogGenerator, MockGitClient, MockScaffolder
from scaffolder.types.projects import CatalogSpec, ProjectSpec, ProjectType
from scaffolder.types.repos import Repository, RepositorySpec

TEST_ORGANISATION = "acme"
TEST_REPOSITORY_NAME = "payments-api"
TEST_OWNER = "group:team-payments"


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_git() -> Generator[MockGitClient, None, None]:
    """
    Provide a MockGitClient for testing.

    Example:
        ```python
        def test_my_feature(mock_git):
            mock_git.configure_create_repository(error=my_error)
            result = my_function(mock_git)
            assert mock_git.was_called("create_repository")
        ```
    """
    client = MockGitClient(owner=TEST_ORGANISATION)
    yield client
    client.reset()


@pytest.fixture
def mock_scaffolder(tmp_path) -> MockScaffolder:
    """Provide a MockScaffolder rooted in a temporary directory."""
    return MockScaffolder(workspace_root=tmp_path)


@pytest.fixture
def mock_catalog_generator(tmp_path) -> MockCatalogGenerator:
    """Provide a MockCatalogGenerator rooted in a temporary directory."""
    return MockCatalogGenerator(workspace_root=tmp_path)


@pytest.fixture
def provisioning_guard() -> ProvisioningGuard:
    """Provide a fresh ProvisioningGuard."""
    return ProvisioningGuard()


@pytest.fixture
def saga(
    mock_git: MockGitClient,
    mock_scaffolder: MockScaffolder,
    mock_catalog_generator: MockCatalogGenerator,
    provisioning_guard: ProvisioningGuard,
) -> ProvisioningSaga:
    """
    Provide a ProvisioningSaga wired to the mocks.

    Example:
        ```python
        def test_rollback(saga, mock_git, repository_spec, project_spec, catalog_spec):
            mock_git.configure_commit_and_push(error=push_error)
            result = saga.provision(repository_spec, project_spec, catalog_spec)
            assert result.rolled_back
        ```
    """
    return ProvisioningSaga(
        git=mock_git,
        scaffolder=mock_scaffolder,
        catalog_generator=mock_catalog_generator,
        policy=ProvisioningPolicy(organisation=TEST_ORGANISATION),
        guard=provisioning_guard,
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def repository_spec() -> RepositorySpec:
    """Provide a valid RepositorySpec."""
    return create_repository_spec()


@pytest.fixture
def project_spec() -> ProjectSpec:
    """Provide a valid ProjectSpec."""
    return create_project_spec()


@pytest.fixture
def catalog_spec() -> CatalogSpec:
    """Provide a valid CatalogSpec."""
    return create_catalog_spec()


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample hosted Repository."""
    return create_mock_repository()


# ============================================================================
# Helper Functions
# ============================================================================


def create_repository_spec(name: str = TEST_REPOSITORY_NAME, **kwargs: Any) -> RepositorySpec:
    """
    Create a RepositorySpec with customizable fields.

    Args:
        name: Repository name
        **kwargs: Additional fields to override

    Returns:
        RepositorySpec object
    """
    defaults = {
        "description": "Payments API",
        "owner": TEST_ORGANISATION,
    }
    defaults.update(kwargs)
    return RepositorySpec(name=name, **defaults)


def create_project_spec(name: str = TEST_REPOSITORY_NAME, **kwargs: Any) -> ProjectSpec:
    """Create a ProjectSpec with customizable fields."""
    defaults = {
        "project_type": ProjectType.APP,
        "owner": TEST_OWNER,
        "author_name": "Jane Doe",
        "author_email": "jane.doe@example.com",
    }
    defaults.update(kwargs)
    return ProjectSpec(name=name, **defaults)


def create_catalog_spec(name: str = TEST_REPOSITORY_NAME, **kwargs: Any) -> CatalogSpec:
    """Create a CatalogSpec with customizable fields."""
    defaults = {
        "owner": TEST_OWNER,
        "description": "Payments API",
    }
    defaults.update(kwargs)
    return CatalogSpec(name=name, **defaults)


def create_mock_repository(
    name: str = TEST_REPOSITORY_NAME,
    owner: str = TEST_ORGANISATION,
    **kwargs: Any,
) -> Repository:
    """
    Create a hosted Repository with customizable fields.

    Args:
        name: Repository name
        owner: Owning user or organisation
        **kwargs: Additional fields to override

    Returns:
        Repository object
    """
    defaults = {
        "full_name": f"{owner}/{name}",
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "html_url": f"https://github.com/{owner}/{name}",
        "private": True,
        "default_branch": "main",
    }
    defaults.update(kwargs)
    return Repository(name=name, **defaults)

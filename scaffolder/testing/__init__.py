"""Scaffolder testing utilities.

Provides mock clients, mock capabilities and fixtures for testing code that
provisions repositories.
"""

from scaffolder.testing.fixtures import (
    create_catalog_spec,
    create_mock_repository,
    create_project_spec,
    create_repository_spec,
)
from scaffolder.testing.mock import (
    MockCall,
    MockCatalogGenerator,
    MockGitClient,
    MockResponse,
    MockScaffolder,
)

__all__ = [
    # Mocks
    "MockGitClient",
    "MockScaffolder",
    "MockCatalogGenerator",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_repository_spec",
    "create_project_spec",
    "create_catalog_spec",
    "create_mock_repository",
]

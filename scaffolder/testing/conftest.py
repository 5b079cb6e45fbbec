"""
Pytest plugin for scaffolder testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["scaffolder.testing.conftest"]

Or import the fixtures directly:

    from scaffolder.testing.fixtures import mock_git, saga
"""

# Re-export all fixtures for pytest auto-discovery
from scaffolder.testing.fixtures import (
    catalog_spec,
    mock_catalog_generator,
    mock_git,
    mock_scaffolder,
    project_spec,
    provisioning_guard,
    repository_spec,
    saga,
    sample_repository,
)

__all__ = [
    "mock_git",
    "mock_scaffolder",
    "mock_catalog_generator",
    "provisioning_guard",
    "saga",
    "repository_spec",
    "project_spec",
    "catalog_spec",
    "sample_repository",
]

"""Scaffolder type definitions.

This module exports all data model types used by the package.
"""

from scaffolder.types.projects import (
    CatalogOutput,
    CatalogSpec,
    ComponentType,
    Lifecycle,
    LocalRepoRef,
    ProjectSpec,
    ProjectType,
    ScaffoldOutput,
)
from scaffolder.types.provisioning import (
    ProvisioningFailure,
    ProvisioningResult,
    ProvisioningState,
    ProvisioningSuccess,
    SagaState,
)
from scaffolder.types.repos import Repository, RepositorySpec, Visibility

__all__ = [
    # Repository types
    "Visibility",
    "RepositorySpec",
    "Repository",
    # Project and catalog types
    "ProjectType",
    "ProjectSpec",
    "ComponentType",
    "Lifecycle",
    "CatalogSpec",
    "LocalRepoRef",
    "ScaffoldOutput",
    "CatalogOutput",
    # Saga types
    "SagaState",
    "ProvisioningState",
    "ProvisioningSuccess",
    "ProvisioningFailure",
    "ProvisioningResult",
]

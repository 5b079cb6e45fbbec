#!/usr/bin/env python3
"""
Provisioning example.

Scaffolds a project into a temporary workspace and runs the provisioning
saga. Without GITHUB_ACCESS_TOKEN the hosting side is replaced by
MockGitClient, so nothing leaves the machine; with it, a real repository is
created in GITHUB_ORGANISATION.

Run with: python examples/provision_repository.py
"""

import json
import logging
import os
import tempfile
from dataclasses import replace

from scaffolder import ProvisioningSaga, ScaffolderConfig
from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.logging import configure_logging
from scaffolder.policy import ProvisioningPolicy
from scaffolder.projects import BackstageCatalogGenerator, TemplateScaffolder, Workspace
from scaffolder.testing import MockGitClient
from scaffolder.tools import ScaffolderTools
from scaffolder.types import CatalogSpec, ProjectSpec, ProjectType, RepositorySpec

configure_logging(level=logging.INFO)

workspace_root = tempfile.mkdtemp(prefix="scaffolder-example-")

if os.environ.get("GITHUB_ACCESS_TOKEN"):
    config = replace(ScaffolderConfig.from_env(), workspace_root=workspace_root)
    saga = ProvisioningSaga.from_config(config)
    organisation = config.organisation
else:
    print("GITHUB_ACCESS_TOKEN not set, using MockGitClient\n")
    workspace = Workspace(workspace_root)
    organisation = "acme"
    saga = ProvisioningSaga(
        MockGitClient(owner=organisation),
        TemplateScaffolder(workspace),
        BackstageCatalogGenerator(workspace),
        policy=ProvisioningPolicy(organisation=organisation),
    )

repository = RepositorySpec(name="payments-api", description="Payments API", owner=organisation)
project = ProjectSpec(
    name="payments-api",
    project_type=ProjectType.APP,
    owner="group:team-payments",
    author_name="Jane Doe",
    author_email="jane.doe@example.com",
)
catalog = CatalogSpec(name="payments-api", owner="group:team-payments", description="Payments API")

# 1. Full saga
print("1. Provisioning payments-api...")
result = saga.provision(repository, project, catalog)
print(json.dumps(result.to_dict(), indent=2))

# 2. Rollback after a failed push (mock only)
if isinstance(saga.git, MockGitClient):
    print("\n2. Provisioning with a rejected push...")
    saga.git.configure_commit_and_push(error=ClassifiedError(ErrorKind.PUSH_FAILED, "remote rejected"))
    result = saga.provision(
        RepositorySpec(name="billing-api", owner=organisation),
        ProjectSpec(
            name="billing-api",
            project_type=ProjectType.LIBRARY,
            owner="group:team-billing",
            author_name="Jane Doe",
            author_email="jane.doe@example.com",
        ),
        CatalogSpec(name="billing-api", owner="group:team-billing"),
    )
    print(json.dumps(result.to_dict(), indent=2))
    print(f"   delete_repository calls: {saga.git.call_count('delete_repository')}")

# 3. Tool surface
print("\n3. Available tools:")
tools = ScaffolderTools(saga.git, saga.scaffolder, saga.catalog_generator, saga)
for name in tools.names:
    print(f"   - {name}")

response = tools.invoke("rename_repository", {"name": "payments-api"})
print(f"\n   unknown tool -> {json.dumps(response.to_dict())}")

saga.git.close()

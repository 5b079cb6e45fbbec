"""
Command line entry point.

    scaffolder provision --name payments-api --project-type app \\
        --owner group:team-payments --author-name "Jane Doe" \\
        --author-email jane@example.com

Configuration comes from ``--config-dir`` (YAML files) or, without it, from
environment variables (see ``ScaffolderConfig.from_env``). The provisioning
result is printed to stdout as JSON.

Exit codes: 0 success, 1 provisioning failed, 2 usage or configuration error.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from scaffolder.config import ScaffolderConfig
from scaffolder.exceptions import ConfigurationError
from scaffolder.logging import configure_logging
from scaffolder.saga import ProvisioningSaga
from scaffolder.types.projects import CatalogSpec, ComponentType, Lifecycle, ProjectSpec, ProjectType
from scaffolder.types.repos import RepositorySpec, Visibility

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="scaffolder", description="Provision scaffolded repositories on GitHub.")
    sub = p.add_subparsers(dest="command", required=True)

    prov = sub.add_parser("provision", help="Create a repository, scaffold it and push the initial commit.")
    prov.add_argument("--name", required=True, help="Repository, project and catalog name (kebab-case).")
    prov.add_argument(
        "--project-type",
        required=True,
        choices=[t.value for t in ProjectType],
        help="Project template to scaffold.",
    )
    prov.add_argument("--owner", required=True, help="Catalog owner group, e.g. 'group:team-payments'.")
    prov.add_argument("--author-name", required=True, help="Project author name.")
    prov.add_argument("--author-email", required=True, help="Project author email.")
    prov.add_argument("--description", default="", help="Repository and catalog description.")
    prov.add_argument(
        "--visibility",
        default=Visibility.INTERNAL.value,
        choices=[v.value for v in Visibility],
        help="Repository visibility (default: internal).",
    )
    prov.add_argument(
        "--component-type",
        default=ComponentType.SERVICE.value,
        choices=[c.value for c in ComponentType],
        help="Catalog component type (default: service).",
    )
    prov.add_argument(
        "--lifecycle",
        default=Lifecycle.EXPERIMENTAL.value,
        choices=[l.value for l in Lifecycle],
        help="Catalog lifecycle (default: experimental).",
    )
    prov.add_argument("--system", default="platform", help="Catalog system (default: platform).")
    prov.add_argument(
        "--config-dir",
        default=None,
        help="Directory with default.yaml and <ENVIRONMENT>.yaml. Without it, configuration is read from the environment.",
    )
    prov.add_argument("--workspace", default=None, help="Root directory for working copies.")
    prov.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr.")
    return p


def _load_config(args: argparse.Namespace) -> ScaffolderConfig:
    if args.config_dir:
        config = ScaffolderConfig.load(args.config_dir)
    else:
        config = ScaffolderConfig.from_env()
    if args.workspace:
        config = replace(config, workspace_root=args.workspace)
    return config


def _provision(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
    except ConfigurationError as e:
        print(f"scaffolder: {e}", file=sys.stderr)
        return EXIT_CONFIG

    repository = RepositorySpec(
        name=args.name,
        description=args.description,
        visibility=Visibility(args.visibility),
        owner=config.organisation,
    )
    project = ProjectSpec(
        name=args.name,
        project_type=ProjectType(args.project_type),
        owner=args.owner,
        author_name=args.author_name,
        author_email=args.author_email,
    )
    catalog = CatalogSpec(
        name=args.name,
        owner=args.owner,
        description=args.description or None,
        component_type=ComponentType(args.component_type),
        lifecycle=Lifecycle(args.lifecycle),
        system=args.system,
    )

    saga = ProvisioningSaga.from_config(config)
    try:
        result = saga.provision(repository, project, catalog)
    finally:
        saga.git.close()

    print(json.dumps(result.to_dict(), indent=2))
    return EXIT_OK if result.ok else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, handler=logging.StreamHandler(sys.stderr))

    if args.command == "provision":
        return _provision(args)
    return EXIT_CONFIG

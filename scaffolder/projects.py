"""
Default scaffold and catalog capabilities.

``TemplateScaffolder`` writes a small deterministic project skeleton per
project type; ``BackstageCatalogGenerator`` writes ``catalog-info.yaml`` next
to it. Both work inside a ``Workspace``: one directory per repository name
under a fixed root.
"""

import json
import shutil
from pathlib import Path
from urllib.parse import urlparse

import yaml

from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.logging import get_logger
from scaffolder.types.projects import (
    CatalogOutput,
    CatalogSpec,
    ProjectSpec,
    ProjectType,
    ScaffoldOutput,
)

CATALOG_FILE_NAME = "catalog-info.yaml"
DEFAULT_DESCRIPTION = "TBD"
DEFAULT_RELEASE_BRANCH = "main"

TYPESCRIPT_PROJECT_TYPES = (ProjectType.APP, ProjectType.LIBRARY, ProjectType.INFRA_CONSTRUCT)

logger = get_logger("projects")


class Workspace:
    """Local root under which every repository gets its working directory."""

    def __init__(self, root: str | Path = "/tmp/scaffolder") -> None:
        self.root = Path(root)

    def project_path(self, name: str) -> Path:
        path = (self.root / name).resolve()
        # Names are validated upstream; this keeps a bad name inside the root.
        if path.parent != self.root.resolve():
            raise ValueError(f"Project name {name!r} escapes the workspace root")
        return path

    def recreate(self, name: str) -> Path:
        """Remove and recreate the working directory for ``name``."""
        path = self.project_path(name)
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
        logger.info(f"Created project directory: {path}")
        return path


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _gitignore(project_type: ProjectType) -> str:
    if project_type is ProjectType.JAVA_APP:
        return "target/\n*.class\n.idea/\n*.iml\n.DS_Store\n"
    return "node_modules/\nlib/\ndist/\ncoverage/\n*.tsbuildinfo\n.DS_Store\n"


def _readme(spec: ProjectSpec) -> str:
    return (
        f"# {spec.name}\n\n"
        f"Owner: `{spec.owner}`\n\n"
        f"Project type: `{spec.project_type.value}`\n\n"
        "## Documentation\n\n"
        "See [docs/index.md](docs/index.md).\n"
    )


def _mkdocs(spec: ProjectSpec) -> str:
    return yaml.safe_dump(
        {"site_name": spec.name, "nav": [{"Home": "index.md"}], "plugins": ["techdocs-core"]},
        sort_keys=False,
    )


def _package_json(spec: ProjectSpec) -> str:
    package = {
        "name": spec.name,
        "version": "0.0.0",
        "private": spec.project_type is ProjectType.APP,
        "main": "lib/index.js",
        "types": "lib/index.d.ts",
        "author": {"name": spec.author_name, "email": spec.author_email},
        "repository": {"type": "git", "url": spec.repo_url},
        "scripts": {"build": "tsc", "test": "jest --passWithNoTests"},
        "devDependencies": {"typescript": "^5.4.0", "jest": "^29.7.0"},
    }
    if spec.project_type is ProjectType.INFRA_CONSTRUCT:
        package["peerDependencies"] = {"cdktf": "^0.20.0", "constructs": "^10.3.0"}
    return json.dumps(package, indent=2) + "\n"


def _tsconfig() -> str:
    config = {
        "compilerOptions": {
            "target": "ES2022",
            "module": "commonjs",
            "declaration": True,
            "outDir": "lib",
            "rootDir": "src",
            "strict": True,
        },
        "include": ["src/**/*.ts"],
    }
    return json.dumps(config, indent=2) + "\n"


def _index_ts(spec: ProjectSpec) -> str:
    if spec.project_type is ProjectType.INFRA_CONSTRUCT:
        return (
            "import { Construct } from 'constructs';\n\n"
            f"export class {_class_name(spec.name)} extends Construct {{\n"
            "  constructor(scope: Construct, id: string) {\n"
            "    super(scope, id);\n"
            "  }\n"
            "}\n"
        )
    return f"export const hello = (): string => 'Hello from {spec.name}';\n"


def _pom(spec: ProjectSpec) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
        "  <modelVersion>4.0.0</modelVersion>\n"
        "  <groupId>org.acme</groupId>\n"
        f"  <artifactId>{spec.name}</artifactId>\n"
        "  <version>0.1.0</version>\n"
        f"  <url>{spec.repo_url}</url>\n"
        "  <developers>\n"
        "    <developer>\n"
        f"      <name>{spec.author_name}</name>\n"
        f"      <email>{spec.author_email}</email>\n"
        "    </developer>\n"
        "  </developers>\n"
        "  <properties>\n"
        "    <maven.compiler.release>17</maven.compiler.release>\n"
        "  </properties>\n"
        "</project>\n"
    )


def _app_java(spec: ProjectSpec) -> str:
    return (
        "public class App {\n"
        "    public static void main(String[] args) {\n"
        f'        System.out.println("Hello from {spec.name}");\n'
        "    }\n"
        "}\n"
    )


def _class_name(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("-") if part)


class TemplateScaffolder:
    """Scaffold capability backed by built-in file templates."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def scaffold(self, spec: ProjectSpec) -> ScaffoldOutput:
        """
        Scaffold a project into a fresh working directory.

        Args:
            spec: Project to scaffold

        Returns:
            ScaffoldOutput with the working directory

        Raises:
            ClassifiedError: SCAFFOLD_FAILED
        """
        try:
            root = self.workspace.recreate(spec.name)
            files = self._files(spec)
            for relative, content in files.items():
                _write_file(root / relative, content)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to scaffold project {spec.name} (type: {spec.project_type.value}): {e}")
            raise ClassifiedError(
                ErrorKind.SCAFFOLD_FAILED,
                f"Failed to scaffold project {spec.name} (type: {spec.project_type.value})",
                cause=e,
            ) from e

        logger.info(f"Scaffolded {len(files)} files for {spec.name} at {root}")
        return ScaffoldOutput(
            working_dir=root,
            message=f"Project {spec.name} scaffolded successfully at {root}.",
        )

    def _files(self, spec: ProjectSpec) -> dict[str, str]:
        files = {
            "README.md": _readme(spec),
            ".gitignore": _gitignore(spec.project_type),
            "docs/index.md": f"# {spec.name}\n\nWelcome to the {spec.name} documentation.\n",
            "mkdocs.yml": _mkdocs(spec),
        }
        if spec.project_type in TYPESCRIPT_PROJECT_TYPES:
            files["package.json"] = _package_json(spec)
            files["tsconfig.json"] = _tsconfig()
            files["src/index.ts"] = _index_ts(spec)
        else:
            files["pom.xml"] = _pom(spec)
            files["src/main/java/App.java"] = _app_java(spec)
        return files


def project_slug(repo_url: str, fallback: str) -> str:
    """Derive ``owner/name`` from a clone URL (https or scp-like ssh)."""
    if repo_url.startswith("git@") and ":" in repo_url:
        path = repo_url.split(":", 1)[1]
    else:
        path = urlparse(repo_url).path
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return path if path.count("/") == 1 else fallback


def build_catalog_entity(spec: CatalogSpec) -> dict:
    """Build the Backstage Component entity for ``spec``."""
    return {
        "apiVersion": "backstage.io/v1alpha1",
        "kind": "Component",
        "metadata": {
            "name": spec.name,
            "description": spec.description or DEFAULT_DESCRIPTION,
            "annotations": {
                "backstage.io/source-location": f"url:{spec.repo_url}",
                "github.com/project-slug": project_slug(spec.repo_url, spec.name),
                "backstage.io/techdocs-ref": "dir:.",
            },
        },
        "spec": {
            "type": spec.component_type.value,
            "lifecycle": spec.lifecycle.value,
            "owner": spec.owner,
            "system": spec.system,
        },
    }


class BackstageCatalogGenerator:
    """Catalog capability writing a Backstage ``catalog-info.yaml``."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def generate_catalog(self, spec: CatalogSpec) -> CatalogOutput:
        """
        Write the catalog descriptor into the scaffolded working directory.

        Raises:
            ClassifiedError: CATALOG_GENERATION_FAILED if the directory is
                missing or the file cannot be written
        """
        try:
            project_path = self.workspace.project_path(spec.name)
        except ValueError as e:
            raise ClassifiedError(ErrorKind.CATALOG_GENERATION_FAILED, str(e), cause=e) from e

        if not project_path.is_dir():
            logger.error(f"Scaffolder base directory does not exist: {project_path}")
            raise ClassifiedError(
                ErrorKind.CATALOG_GENERATION_FAILED,
                f"Base directory {project_path} is missing; scaffold the project first",
            )

        catalog_path = project_path / CATALOG_FILE_NAME
        try:
            content = yaml.safe_dump(build_catalog_entity(spec), sort_keys=False, indent=2)
            catalog_path.write_text(content, encoding="utf-8")
        except (OSError, yaml.YAMLError) as e:
            raise ClassifiedError(
                ErrorKind.CATALOG_GENERATION_FAILED,
                f"Failed to write {CATALOG_FILE_NAME} for {spec.name} at {project_path}",
                cause=e,
            ) from e

        logger.info(f"Wrote catalog descriptor {catalog_path}")
        return CatalogOutput(catalog_path=catalog_path)

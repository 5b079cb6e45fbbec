"""
Tests for the command line entry point.
"""

import json
import logging
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from scaffolder.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, build_parser, main
from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.logging import get_logger
from scaffolder.saga import ProvisioningSaga

TOKEN = "ghp_testtoken1234567890abcdef"

ARGS = [
    "provision",
    "--name", "payments-api",
    "--project-type", "app",
    "--owner", "group:team-payments",
    "--author-name", "Jane Doe",
    "--author-email", "jane.doe@example.com",
]


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    # main() installs a stderr handler bound to the captured stream.
    for name in (None, "http", "git", "saga"):
        logger = get_logger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", TOKEN)
    monkeypatch.setenv("GITHUB_ORGANISATION", "acme")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("SCAFFOLDER_WORKSPACE", raising=False)
    monkeypatch.delenv("SCAFFOLDER_ALLOW_PUBLIC", raising=False)


def test_parser_defaults() -> None:
    args = build_parser().parse_args(ARGS)

    assert args.visibility == "internal"
    assert args.component_type == "service"
    assert args.lifecycle == "experimental"
    assert args.system == "platform"
    assert args.config_dir is None


def test_parser_rejects_unknown_project_type() -> None:
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args([*ARGS[:3], "--project-type", "cobol", *ARGS[5:]])

    assert exc_info.value.code == 2


def test_provision_success(env, saga, mock_git, capsys) -> None:
    with patch.object(ProvisioningSaga, "from_config", return_value=saga) as from_config:
        code = main(ARGS)

    assert code == EXIT_OK
    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "success"
    assert output["response"]["repositoryUrl"] == "https://github.com/acme/payments-api.git"
    config = from_config.call_args.args[0]
    assert config.organisation == "acme"
    spec = mock_git.get_calls("create_repository")[0].args[0]
    assert spec.owner == "acme"


def test_provision_failure(env, saga, mock_git, capsys) -> None:
    mock_git.configure_commit_and_push(error=ClassifiedError(ErrorKind.PUSH_FAILED, "rejected"))

    with patch.object(ProvisioningSaga, "from_config", return_value=saga):
        code = main(ARGS)

    assert code == EXIT_FAILED
    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "failed"
    assert output["rollback"] is True


def test_workspace_override(env, saga) -> None:
    with patch.object(ProvisioningSaga, "from_config", return_value=saga) as from_config:
        main([*ARGS, "--workspace", "/srv/work"])

    assert from_config.call_args.args[0].workspace_root == "/srv/work"


def test_missing_token_is_configuration_error(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv("GITHUB_ACCESS_TOKEN", raising=False)

    code = main(ARGS)

    assert code == EXIT_CONFIG
    assert "GITHUB_ACCESS_TOKEN" in capsys.readouterr().err


def test_config_dir(monkeypatch: pytest.MonkeyPatch, tmp_path, saga) -> None:
    monkeypatch.delenv("GITHUB_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_ORGANISATION", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    (tmp_path / "default.yaml").write_text(f"github:\n  access_token: {TOKEN}\n  organisation: acme\n")

    with patch.object(ProvisioningSaga, "from_config", return_value=saga) as from_config:
        code = main([*ARGS, "--config-dir", str(tmp_path)])

    assert code == EXIT_OK
    assert from_config.call_args.args[0].organisation == "acme"

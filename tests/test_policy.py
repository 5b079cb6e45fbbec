"""
Tests for the provisioning validation policy.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from scaffolder.exceptions import ErrorKind
from scaffolder.policy import ProvisioningPolicy, is_valid_repository_name
from scaffolder.testing import create_catalog_spec, create_project_spec, create_repository_spec
from scaffolder.types.repos import Visibility

valid_name_strategy = st.from_regex(r"[a-z0-9][a-z0-9-]{1,38}[a-z0-9]", fullmatch=True)


def kinds(errors) -> list[ErrorKind]:
    return [error.kind for error in errors]


@pytest.fixture
def policy() -> ProvisioningPolicy:
    return ProvisioningPolicy(organisation="acme")


def test_valid_request_passes(policy: ProvisioningPolicy) -> None:
    assert policy.validate(create_repository_spec(), create_project_spec(), create_catalog_spec()) == []


@pytest.mark.parametrize(
    "name",
    ["AB", "ab", "-bad", "bad-", "ok_name", "Payments-Api", "a" * 41, "payments-api\n", "pay ments"],
)
def test_invalid_repository_names(name: str) -> None:
    assert not is_valid_repository_name(name)


@given(name=valid_name_strategy)
@settings(max_examples=100)
def test_kebab_case_names_are_accepted(name: str) -> None:
    """
    Property: Kebab-case names are valid

    Any lowercase alphanumeric/hyphen name of 3-40 characters that neither
    starts nor ends with a hyphen is a valid repository name.
    """
    assert is_valid_repository_name(name)


def test_invalid_name_is_reported_as_invalid_repository(policy: ProvisioningPolicy) -> None:
    errors = policy.validate_repository(create_repository_spec(name="-bad"))

    assert kinds(errors) == [ErrorKind.INVALID_REPOSITORY]


def test_description_too_long(policy: ProvisioningPolicy) -> None:
    errors = policy.validate_repository(create_repository_spec(description="x" * 257))

    assert kinds(errors) == [ErrorKind.INVALID_REPOSITORY]


def test_public_repositories_need_opt_in() -> None:
    spec = create_repository_spec(visibility=Visibility.PUBLIC)

    assert kinds(ProvisioningPolicy(organisation="acme").validate_repository(spec)) == [ErrorKind.INVALID_REPOSITORY]
    assert ProvisioningPolicy(organisation="acme", allow_public=True).validate_repository(spec) == []


def test_owner_must_match_configured_organisation(policy: ProvisioningPolicy) -> None:
    errors = policy.validate_repository(create_repository_spec(owner="other-org"))

    assert kinds(errors) == [ErrorKind.INVALID_REPOSITORY]
    assert "other-org" in errors[0].message


def test_owner_without_configured_organisation() -> None:
    errors = ProvisioningPolicy().validate_repository(create_repository_spec(owner="acme"))

    assert kinds(errors) == [ErrorKind.INVALID_REPOSITORY]


def test_no_owner_is_always_allowed() -> None:
    assert ProvisioningPolicy().validate_repository(create_repository_spec(owner=None)) == []


def test_project_name_must_match_repository(policy: ProvisioningPolicy) -> None:
    errors = policy.validate_project(create_repository_spec(), create_project_spec(name="billing-service"))

    assert kinds(errors) == [ErrorKind.INVALID_PROJECT]


def test_project_name_minimum_length(policy: ProvisioningPolicy) -> None:
    errors = policy.validate_project(create_repository_spec(name="short"), create_project_spec(name="short"))

    assert kinds(errors) == [ErrorKind.INVALID_PROJECT]


@pytest.mark.parametrize("owner", ["team-payments", "group:", "user:jane", ""])
def test_malformed_owner_is_rejected_not_rewritten(policy: ProvisioningPolicy, owner: str) -> None:
    project = create_project_spec(owner=owner)

    errors = policy.validate_project(create_repository_spec(), project)

    assert kinds(errors) == [ErrorKind.INVALID_PROJECT]
    assert project.owner == owner


def test_author_checks(policy: ProvisioningPolicy) -> None:
    project = create_project_spec(author_name="JD", author_email="not-an-email")

    errors = policy.validate_project(create_repository_spec(), project)

    assert kinds(errors) == [ErrorKind.INVALID_PROJECT, ErrorKind.INVALID_PROJECT]


def test_catalog_checks(policy: ProvisioningPolicy) -> None:
    catalog = create_catalog_spec(name="other-name", owner="team-payments")

    errors = policy.validate_catalog(create_repository_spec(), catalog)

    assert kinds(errors) == [ErrorKind.INVALID_PROJECT, ErrorKind.INVALID_PROJECT]


def test_all_violations_are_collected(policy: ProvisioningPolicy) -> None:
    errors = policy.validate(
        create_repository_spec(name="AB", owner="other-org"),
        create_project_spec(name="AB", owner="nobody"),
        create_catalog_spec(name="AB", owner="nobody"),
    )

    assert kinds(errors).count(ErrorKind.INVALID_REPOSITORY) == 2
    assert ErrorKind.INVALID_PROJECT in kinds(errors)

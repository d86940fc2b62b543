"""Contains unit tests for the branch name mapping policy."""

import pytest

from git_branch_mirror.synchronize.mapping import BranchNameMapper, map_branch_name

BRANCH_NAMES = [
    "main",
    "master",
    "develop",
    "feature/x",
    "/feature/x/",
    "mirror",
    "mirror/",
    "mirror/feature/x",
    "mirrored/feature",
    "release/1.0",
    "/",
    "",
]

PREFIXES = ["mirror", "/mirror/", "mirror/", "team/mirror", "/"]


@pytest.mark.parametrize("branch", BRANCH_NAMES)
@pytest.mark.parametrize("prefix", ["", None])
def test_map_without_prefix_is_identity(branch: str, prefix: str | None) -> None:
    """Test that a missing prefix leaves every branch name unchanged."""
    assert map_branch_name(branch, prefix) == branch


@pytest.mark.parametrize("branch", ["master", "develop"])
@pytest.mark.parametrize("prefix", PREFIXES)
def test_exempt_branches_are_not_prefixed(branch: str, prefix: str) -> None:
    """Test that master and develop keep their names under any prefix."""
    assert map_branch_name(branch, prefix) == branch


@pytest.mark.parametrize("branch", BRANCH_NAMES)
@pytest.mark.parametrize("prefix", PREFIXES + [""])
def test_map_is_idempotent(branch: str, prefix: str) -> None:
    """Test that mapping an already mapped name is a no-op."""
    once = map_branch_name(branch, prefix)
    assert map_branch_name(once, prefix) == once


@pytest.mark.parametrize(
    "branch,prefix,expected",
    [
        pytest.param("feature/x", "mirror", "mirror/feature/x", id="prefix added"),
        pytest.param("mirror/feature/x", "mirror", "mirror/feature/x", id="already prefixed"),
        pytest.param("/feature/x/", "/mirror/", "mirror/feature/x", id="slashes trimmed"),
        pytest.param("/feature/x/", "/", "feature/x", id="slash-only prefix ignored"),
        pytest.param("mirrored/feature", "mirror", "mirror/mirrored/feature", id="prefix must end at a slash"),
        pytest.param("main", "team/mirror", "team/mirror/main", id="nested prefix"),
        pytest.param("master", "mirror", "master", id="master exempt"),
        pytest.param("develop", "mirror", "develop", id="develop exempt"),
    ],
)
def test_map_examples(branch: str, prefix: str, expected: str) -> None:
    """Test concrete mapping examples."""
    assert map_branch_name(branch, prefix) == expected


def test_mapper_applies_configured_prefix() -> None:
    """Test that the mapper class applies its configured prefix and can be used as a callable."""
    mapper = BranchNameMapper("mirror")
    assert mapper.map("feature/x") == "mirror/feature/x"
    assert mapper("feature/y") == "mirror/feature/y"
    assert BranchNameMapper().map("feature/x") == "feature/x"

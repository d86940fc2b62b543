"""Unit tests for the command line interface."""

from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from git_branch_mirror.configuration.cli import typer_app
from git_branch_mirror.configuration.exceptions import RequiredConfigurationElementError
from git_branch_mirror.configuration.models import CredentialType, SyncConfig
from git_branch_mirror.git.exceptions import CommandExecutionError
from git_branch_mirror.synchronize.exceptions import JobSynchronizationError
from git_branch_mirror.synchronize.results import SyncRunResult

runner = CliRunner()

FAKE_CONFIG = SyncConfig(
    debug=False,
    git_dir=Path("/repo"),
    branch="main",
    source_url="https://source.example.com/repo.git",
    branch_pattern=None,
    source_token=None,
    target_token=None,
    credential_type=CredentialType.URL,
    forced_prefix=None,
    delay=0.0,
    continue_on_error=False,
)


@pytest.fixture(autouse=True)
def mock_configure_logging() -> Generator[MagicMock, None, None]:
    """Keep the CLI from reconfiguring logging during tests."""
    with patch("git_branch_mirror.configuration.cli.configure_logging") as mock_configure:
        yield mock_configure


def test_sync_passes_options_to_configuration() -> None:
    """Test that command line options reach the configuration and a successful run exits with 0."""
    with (
        patch("git_branch_mirror.configuration.cli.get_sync_config", return_value=FAKE_CONFIG) as mock_config,
        patch(
            "git_branch_mirror.configuration.cli.run_sync_workflow",
            new=AsyncMock(return_value=SyncRunResult(processed_jobs=["ROOT", "lib"])),
        ) as mock_run,
    ):
        result = runner.invoke(
            typer_app,
            ["sync", "-b", "main", "-u", "https://source.example.com/repo.git", "-d", "/repo", "-f", "mirror", "--credential-type", "bearer", "--delay", "2"],
        )

    assert result.exit_code == 0, result.output
    assert "Synchronized 2 repositories" in result.output
    kwargs = mock_config.call_args.kwargs
    assert kwargs["branch"] == "main"
    assert kwargs["source_url"] == "https://source.example.com/repo.git"
    assert kwargs["git_dir"] == Path("/repo")
    assert kwargs["forced_prefix"] == "mirror"
    assert kwargs["credential_type"] == CredentialType.BEARER
    assert kwargs["delay"] == 2.0
    mock_run.assert_awaited_once_with(FAKE_CONFIG)


def test_sync_reports_configuration_error() -> None:
    """Test that a configuration error is printed and exits with 1."""
    error = RequiredConfigurationElementError(name="Branch", cli_name="--branch", env_name="BRANCH")
    with patch("git_branch_mirror.configuration.cli.get_sync_config", side_effect=error):
        result = runner.invoke(typer_app, ["sync"])

    assert result.exit_code == 1
    assert "Missing required configuration element: Branch" in result.output


def test_sync_reports_failing_job() -> None:
    """Test that an aborted run prints the failing job and exits with 1."""
    error = JobSynchronizationError("lib", "/repo/lib", CommandExecutionError(["git", "merge"], 1))
    with (
        patch("git_branch_mirror.configuration.cli.get_sync_config", return_value=FAKE_CONFIG),
        patch("git_branch_mirror.configuration.cli.run_sync_workflow", new=AsyncMock(side_effect=error)),
    ):
        result = runner.invoke(typer_app, ["sync"])

    assert result.exit_code == 1
    assert "[lib] Failed executing command line 'git merge' (Exit code: 1)" in result.output


def test_sync_reports_skipped_failures() -> None:
    """Test that failures collected with --continue-on-error are listed and exit with 1."""
    error = JobSynchronizationError("lib", "/repo/lib", CommandExecutionError(["git", "push"], 1))
    run_result = SyncRunResult(processed_jobs=["ROOT"], errors=[error])
    with (
        patch("git_branch_mirror.configuration.cli.get_sync_config", return_value=FAKE_CONFIG) as mock_config,
        patch("git_branch_mirror.configuration.cli.run_sync_workflow", new=AsyncMock(return_value=run_result)),
    ):
        result = runner.invoke(typer_app, ["sync", "--continue-on-error"])

    assert result.exit_code == 1
    assert mock_config.call_args.kwargs["continue_on_error"] is True
    assert "1 repositories failed to synchronize:" in result.output
    assert "[lib] Failed executing command line 'git push'" in result.output


def test_sync_reports_unexpected_error() -> None:
    """Test that unexpected errors are reported without a traceback and exit with 1."""
    with patch("git_branch_mirror.configuration.cli.get_sync_config", side_effect=RuntimeError("boom")):
        result = runner.invoke(typer_app, ["sync"])

    assert result.exit_code == 1
    assert "Unexpected error: boom" in result.output


def test_sync_rejects_unknown_credential_type() -> None:
    """Test that the credential type is restricted to the supported values."""
    result = runner.invoke(typer_app, ["sync", "--credential-type", "cookie"])

    assert result.exit_code != 0

"""Unit tests for the configuration driver module."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from git_branch_mirror.configuration import driver
from git_branch_mirror.configuration.models import CredentialType, SyncConfig


def test_get_sync_config_returns_reconciled_config() -> None:
    """Test that get_sync_config runs the reconciliation and passes the CLI values through."""
    fake_config = SyncConfig(
        debug=False,
        git_dir=Path("/repo"),
        branch="main",
        source_url="https://source.example.com/repo.git",
        branch_pattern=None,
        source_token=None,
        target_token=None,
        credential_type=CredentialType.URL,
        forced_prefix="mirror",
        delay=0.0,
        continue_on_error=False,
    )
    with patch(
        "git_branch_mirror.configuration.reconcile.reconcile_sync_configuration",
        new=AsyncMock(return_value=fake_config),
    ) as mock_reconcile:
        result = driver.get_sync_config(
            git_dir=Path("/repo"),
            branch="main",
            source_url="https://source.example.com/repo.git",
            forced_prefix="mirror",
        )

    mock_reconcile.assert_awaited_once_with(
        cli_debug=False,
        cli_git_dir=Path("/repo"),
        cli_branch="main",
        cli_source_url="https://source.example.com/repo.git",
        cli_branch_pattern=None,
        cli_source_token=None,
        cli_target_token=None,
        cli_credential_type=None,
        cli_forced_prefix="mirror",
        cli_delay=None,
        cli_continue_on_error=False,
    )
    assert result == fake_config

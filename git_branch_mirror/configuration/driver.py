"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from git_branch_mirror.configuration import reconcile
from git_branch_mirror.configuration.models import CredentialType, SyncConfig


def get_sync_config(
    debug: bool = False,
    git_dir: Path | None = None,
    branch: str | None = None,
    source_url: str | None = None,
    branch_pattern: str | None = None,
    source_token: str | None = None,
    target_token: str | None = None,
    credential_type: CredentialType | None = None,
    forced_prefix: str | None = None,
    delay: float | None = None,
    continue_on_error: bool = False,
) -> SyncConfig:
    """Synchronously get the reconciled sync configuration."""
    return asyncio.run(
        reconcile.reconcile_sync_configuration(
            cli_debug=debug,
            cli_git_dir=git_dir,
            cli_branch=branch,
            cli_source_url=source_url,
            cli_branch_pattern=branch_pattern,
            cli_source_token=source_token,
            cli_target_token=target_token,
            cli_credential_type=credential_type,
            cli_forced_prefix=forced_prefix,
            cli_delay=delay,
            cli_continue_on_error=continue_on_error,
        )
    )

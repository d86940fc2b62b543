"""Reconciles configuration between CLI arguments and environment variables."""

import re
from pathlib import Path

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.configuration.env import settings
from git_branch_mirror.configuration.exceptions import (
    CredentialConfigurationError,
    InvalidBranchPatternError,
    InvalidConfigurationValueError,
    RequiredConfigurationElementError,
)
from git_branch_mirror.configuration.models import CredentialType, SyncConfig
from git_branch_mirror.utils.helpers import strip_heads_prefix

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


async def compile_branch_pattern(pattern: str | None) -> re.Pattern[str] | None:
    """Compiles the branch discovery pattern once for the whole run.

    Args:
        pattern (str | None): The regular expression matched against source branch names.

    Raises:
        InvalidBranchPatternError: If the pattern does not compile.

    Returns:
        re.Pattern[str] | None: The compiled pattern, or None when branch discovery is disabled.
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.DOTALL)
    except re.error as e:
        raise InvalidBranchPatternError(pattern, str(e)) from e


async def validate_credential_configuration(
    source_token: str | None,
    target_token: str | None,
    credential_type: CredentialType,
) -> None:
    """Validates that the credentials can be presented in the requested way.

    Args:
        source_token (str | None): The credential for the source repository.
        target_token (str | None): The credential for the target repository.
        credential_type (CredentialType): How the credentials are presented to HTTP(S) remotes.

    Raises:
        CredentialConfigurationError: If a credential contains characters that would corrupt the URL or header it is placed in.
    """
    for label, token in (("source", source_token), ("target", target_token)):
        if token is None:
            continue
        if not token.strip():
            raise CredentialConfigurationError(f"The {label} credential is empty")
        if any(c in token for c in "\r\n"):
            raise CredentialConfigurationError(f"The {label} credential must not contain line breaks")
        if credential_type == CredentialType.URL and any(c in token for c in "/?#@="):
            raise CredentialConfigurationError(
                f"The {label} credential cannot be placed in a URL because it contains one of '/?#@='. Use a header credential type instead."
            )


async def reconcile_sync_configuration(
    cli_debug: bool = False,
    cli_git_dir: Path | None = None,
    cli_branch: str | None = None,
    cli_source_url: str | None = None,
    cli_branch_pattern: str | None = None,
    cli_source_token: str | None = None,
    cli_target_token: str | None = None,
    cli_credential_type: CredentialType | None = None,
    cli_forced_prefix: str | None = None,
    cli_delay: float | None = None,
    cli_continue_on_error: bool = False,
) -> SyncConfig:
    """Reconciles the sync command configuration. Command line values take precedence over environment values.

    Raises:
        RequiredConfigurationElementError: If the branch or source URL is missing.
        InvalidConfigurationValueError: If the delay is negative.
        InvalidBranchPatternError: If the discovery pattern does not compile.
        CredentialConfigurationError: If a credential cannot be presented as requested.

    Returns:
        SyncConfig: The resolved configuration.
    """
    debug = cli_debug or settings.DEBUG
    git_dir = cli_git_dir or settings.REPOSITORY_PATH
    branch = cli_branch or settings.BRANCH
    source_url = cli_source_url or settings.SOURCE_URL
    branch_pattern = cli_branch_pattern or settings.BRANCH_PATTERN
    source_token = cli_source_token or settings.SOURCE_TOKEN
    target_token = cli_target_token or settings.TARGET_TOKEN
    credential_type = cli_credential_type or settings.CREDENTIAL_TYPE
    forced_prefix = cli_forced_prefix or settings.FORCED_PREFIX
    delay = cli_delay if cli_delay is not None else settings.SYNC_DELAY
    continue_on_error = cli_continue_on_error or settings.CONTINUE_ON_ERROR

    if not branch:
        raise RequiredConfigurationElementError(name="Branch", cli_name="--branch", env_name="BRANCH")
    if not source_url:
        raise RequiredConfigurationElementError(name="Source repository URL", cli_name="--source-url", env_name="SOURCE_URL")
    if delay < 0:
        raise InvalidConfigurationValueError(f"Delay between synchronization jobs must not be negative, got {delay}")

    await validate_credential_configuration(source_token, target_token, credential_type)
    compiled_pattern = await compile_branch_pattern(branch_pattern)
    if compiled_pattern is None:
        logger.info("No branch discovery pattern configured, un-mapped branches will not be replicated")

    return SyncConfig(
        debug=debug,
        git_dir=Path(git_dir).resolve(),
        branch=strip_heads_prefix(branch),
        source_url=source_url,
        branch_pattern=compiled_pattern,
        source_token=source_token,
        target_token=target_token,
        credential_type=CredentialType(credential_type),
        forced_prefix=forced_prefix,
        delay=delay,
        continue_on_error=continue_on_error,
    )

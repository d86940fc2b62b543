"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import traceback
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from git_branch_mirror.configuration.driver import get_sync_config
from git_branch_mirror.configuration.models import CredentialType
from git_branch_mirror.exceptions import GitBranchMirrorError
from git_branch_mirror.synchronize.driver import run_sync_workflow
from git_branch_mirror.utils.logging_config import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Mirror branches from a source repository tree into a target repository tree.")


@typer_app.callback()
def main_callback() -> None:
    """Mirror branches from a source repository tree into a target repository tree."""


@typer_app.command(name="sync")
def sync_cli(
    branch: Annotated[str | None, Option("--branch", "-b", envvar="BRANCH", help="Branch to sync from source to origin.")] = None,
    source_url: Annotated[str | None, Option("--source-url", "-u", envvar="SOURCE_URL", help="Source repository URL to sync from.")] = None,
    git_dir: Annotated[Path | None, Option("--git-dir", "-d", envvar="REPOSITORY_PATH", help="Git working directory.")] = None,
    branch_pattern: Annotated[
        str | None, Option("--pattern", "-p", envvar="BRANCH_PATTERN", help="Regular expression selecting source branches to discover.")
    ] = None,
    source_token: Annotated[
        str | None, Option("--source-token", "-t", envvar="SOURCE_TOKEN", help="Access token for the source repository over HTTP/HTTPS.")
    ] = None,
    target_token: Annotated[
        str | None, Option("--target-token", envvar="TARGET_TOKEN", help="Access token for the target repository over HTTP/HTTPS.")
    ] = None,
    credential_type: Annotated[
        CredentialType | None,
        Option("--credential-type", envvar="CREDENTIAL_TYPE", help="How access tokens are presented: in the URL, or as a bearer or basic Authorization header."),
    ] = None,
    forced_prefix: Annotated[
        str | None, Option("--forced-prefix", "-f", envvar="FORCED_PREFIX", help="Force a prefix in each merged branch in the target repository.")
    ] = None,
    delay: Annotated[float | None, Option("--delay", envvar="SYNC_DELAY", help="Seconds to wait between two synchronization jobs.")] = None,
    continue_on_error: Annotated[
        bool, Option("--continue-on-error", envvar="CONTINUE_ON_ERROR", help="Skip the submodules of a failing repository instead of aborting.")
    ] = False,
    debug: Annotated[bool, Option("--debug", envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Synchronize a branch, and the branches matching the discovery pattern, from the source repository."""
    configure_logging(debug)
    try:
        config = get_sync_config(
            debug=debug,
            git_dir=git_dir,
            branch=branch,
            source_url=source_url,
            branch_pattern=branch_pattern,
            source_token=source_token,
            target_token=target_token,
            credential_type=credential_type,
            forced_prefix=forced_prefix,
            delay=delay,
            continue_on_error=continue_on_error,
        )
        configure_logging(config.debug)
        result = asyncio.run(run_sync_workflow(config))
    except GitBranchMirrorError as exc:
        if debug:
            traceback.print_exc()
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    except Exception as exc:
        if debug:
            traceback.print_exc()
        typer.echo(f"Unexpected error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if not result.succeeded:
        typer.echo(f"{len(result.errors)} repositories failed to synchronize:", err=True)
        for error in result.errors:
            typer.echo(str(error), err=True)
        raise typer.Exit(1)

    typer.echo(f"Synchronized {len(result.processed_jobs)} repositories")


if __name__ == "__main__":
    typer_app()

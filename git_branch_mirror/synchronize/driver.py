"""Orchestrates the mirroring of a repository tree."""

import time

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.configuration.models import SyncConfig
from git_branch_mirror.git.credentials import RemoteCredential
from git_branch_mirror.git.runner import ProcessRunner
from git_branch_mirror.synchronize.jobs import JobSynchronizer
from git_branch_mirror.synchronize.mapping import BranchNameMapper
from git_branch_mirror.synchronize.models import SyncJob
from git_branch_mirror.synchronize.results import SyncRunResult
from git_branch_mirror.synchronize.traversal import TraversalController
from git_branch_mirror.utils.helpers import mask_url, strip_heads_prefix

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


def build_root_job(config: SyncConfig) -> SyncJob:
    """Build the job of the top-level repository. Its target is whatever 'origin' is already configured."""
    return SyncJob(
        name=None,
        local_folder=config.git_dir.resolve(),
        source_url=config.source_url,
        target_url=None,
        branch=strip_heads_prefix(config.branch),
    )


def build_job_synchronizer(config: SyncConfig, runner: ProcessRunner) -> JobSynchronizer:
    """Build the synchronizer shared by all jobs of a run from the reconciled configuration."""
    source_credential = RemoteCredential(config.source_token, config.credential_type) if config.source_token else None
    target_credential = RemoteCredential(config.target_token, config.credential_type) if config.target_token else None
    return JobSynchronizer(
        runner=runner,
        mapper=BranchNameMapper(config.forced_prefix),
        branch_pattern=config.branch_pattern,
        source_credential=source_credential,
        target_credential=target_credential,
    )


async def run_sync_workflow(config: SyncConfig, runner: ProcessRunner | None = None) -> SyncRunResult:
    """Run the sync workflow: mirror the configured branch of the repository tree and discover un-mapped branches.

    Args:
        config (SyncConfig): The reconciled configuration of the run.
        runner (ProcessRunner | None): Runs the git commands. A subprocess runner is used when omitted.

    Returns:
        SyncRunResult: The outcome of the traversal.
    """
    runner = runner or ProcessRunner()
    root_job = build_root_job(config)
    synchronizer = build_job_synchronizer(config, runner)
    controller = TraversalController(
        synchronizer.synchronize,
        delay=config.delay,
        continue_on_error=config.continue_on_error,
    )

    start_time = time.time()
    logger.info(
        "Starting synchronization",
        local_folder=str(root_job.local_folder),
        branch=root_job.branch,
        source_url=mask_url(config.source_url),
        forced_prefix=config.forced_prefix,
        pattern=config.branch_pattern.pattern if config.branch_pattern else None,
    )
    result = await controller.run(root_job)
    end_time = time.time()
    logger.info(
        "Finished synchronization",
        start_time=start_time,
        end_time=end_time,
        duration=round(end_time - start_time, 2),
        processed_jobs=len(result.processed_jobs),
        failed_jobs=len(result.errors),
    )
    return result

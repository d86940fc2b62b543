"""Drives the synchronization of a repository and its submodules with an explicit work list.

Jobs are kept on a stack instead of being synchronized recursively, so deep
submodule trees never grow the call stack. Children are pushed in discovery
order, which makes the traversal depth-first with the last discovered sibling
processed first.
"""

import asyncio
from pathlib import Path
from typing import AsyncIterator, Callable

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.synchronize.exceptions import JobSynchronizationError, SubmoduleCycleError
from git_branch_mirror.synchronize.models import SyncJob
from git_branch_mirror.synchronize.results import SyncRunResult

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore

JobSynchronizeFunction = Callable[[SyncJob], AsyncIterator[SyncJob]]


class TraversalController:
    """Pops jobs off a LIFO work list, synchronizes them and pushes the jobs they discover."""

    def __init__(self, synchronize: JobSynchronizeFunction, delay: float = 0.0, continue_on_error: bool = False) -> None:
        """Initialize the controller.

        Args:
            synchronize (JobSynchronizeFunction): Synchronizes one job, yielding its child jobs.
            delay (float): Seconds to wait between two jobs, to throttle the rate of remote operations.
            continue_on_error (bool): Record a failing job and skip its subtree instead of aborting the run.
        """
        self.synchronize = synchronize
        self.delay = delay
        self.continue_on_error = continue_on_error

    async def run(self, root_job: SyncJob) -> SyncRunResult:
        """Synchronize the root job and every job discovered beneath it.

        Raises:
            JobSynchronizationError: If a job fails and continue_on_error is off.
            SubmoduleCycleError: If a working tree is reached twice.

        Returns:
            SyncRunResult: The processed jobs, and the failures when continue_on_error is on.
        """
        result = SyncRunResult()
        stack: list[SyncJob] = [root_job]
        visited: set[Path] = set()
        first = True

        while stack:
            if not first and self.delay > 0:
                logger.debug("Waiting before next job", delay=self.delay)
                await asyncio.sleep(self.delay)
            first = False

            job = stack.pop()
            folder = Path(job.local_folder).resolve()
            if folder in visited:
                raise SubmoduleCycleError(job.display_name, str(folder))
            visited.add(folder)

            logger.info("Synchronizing job", job=job.display_name, local_folder=str(folder), branch=job.branch, pending=len(stack))
            children: list[SyncJob] = []
            try:
                async for child in self.synchronize(job):
                    children.append(child)
            except SubmoduleCycleError:
                raise
            except Exception as e:
                error = JobSynchronizationError(job.display_name, str(folder), e)
                if not self.continue_on_error:
                    raise error from e
                logger.error("Job failed, skipping its submodules", job=job.display_name, error=str(e))
                result.errors.append(error)
                continue

            result.processed_jobs.append(job.display_name)
            stack.extend(children)

        logger.info("Synchronization finished", processed=len(result.processed_jobs), failed=len(result.errors))
        return result

"""Synchronizes a single repository node of the tree and discovers its submodule jobs.

For every job the steps run strictly in order:

1. Resolve the target remote ('origin'), re-pointing it when the job carries a target URL.
2. Resolve the source remote ('source') from the job's source URL.
3. Locate the job's branch on the source. A missing branch is not an error: the
   branch steps are skipped and submodules are still discovered.
4. Merge the source branch into the target branch and push it under its mapped name.
5. Replicate source branches matching the discovery pattern that the target lacks.
6. Yield a child job for every submodule that is configured for mirroring.

Any failing git command aborts the job by raising ``CommandExecutionError``.
"""

import re
from typing import AsyncIterator

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.git.credentials import RemoteCredential, credential_overrides
from git_branch_mirror.git.exceptions import RemoteNotFoundError
from git_branch_mirror.git.repository import Remote, RemoteBranch, Repository
from git_branch_mirror.git.runner import ProcessRunner
from git_branch_mirror.git.submodules import (
    has_submodules,
    init_submodule,
    read_submodules,
    resolve_submodule_url,
    update_submodule,
)
from git_branch_mirror.synchronize.mapping import BranchNameMapper
from git_branch_mirror.synchronize.models import SyncJob, SyncState
from git_branch_mirror.synchronize.reconcile import find_unmapped_branches
from git_branch_mirror.utils.constants import (
    SOURCE_REMOTE_NAME,
    SUBMODULE_IGNORE_MIRROR_KEY,
    SUBMODULE_SOURCE_URL_KEY,
    TARGET_REMOTE_NAME,
)
from git_branch_mirror.utils.helpers import is_truthy_flag, mask_url, strip_heads_prefix

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


class JobSynchronizer:
    """Runs the synchronization steps of one job at a time."""

    def __init__(
        self,
        runner: ProcessRunner,
        mapper: BranchNameMapper,
        branch_pattern: re.Pattern[str] | None = None,
        source_credential: RemoteCredential | None = None,
        target_credential: RemoteCredential | None = None,
    ) -> None:
        """Initialize the synchronizer with the settings shared by every job of a run.

        Args:
            runner (ProcessRunner): Runs the git commands.
            mapper (BranchNameMapper): Maps source branch names to target branch names.
            branch_pattern (re.Pattern[str] | None): Selects the source branches to replicate. None disables replication.
            source_credential (RemoteCredential | None): Credential for HTTP(S) source remotes.
            target_credential (RemoteCredential | None): Credential for HTTP(S) target remotes.
        """
        self.runner = runner
        self.mapper = mapper
        self.branch_pattern = branch_pattern
        self.source_credential = source_credential
        self.target_credential = target_credential

    async def synchronize(self, job: SyncJob) -> AsyncIterator[SyncJob]:
        """Synchronize a job, yielding a child job for every submodule to synchronize next."""
        log = logger.bind(job=job.display_name)
        repository = Repository(job.local_folder, self.runner)
        self._enter(log, SyncState.START)

        origin = await self.resolve_target_remote(repository, job, log)

        if not job.source_url:
            log.info("No source URL configured, skipping branch synchronization")
        elif not job.branch:
            log.warning("No branch configured, skipping branch synchronization")
        else:
            source = await self.resolve_source_remote(repository, job.source_url, log)
            self._enter(log, SyncState.SOURCE_RESOLVED)

            source_branch = await self.locate_source_branch(source, job.branch, log)
            if source_branch is not None:
                await self.sync_branch(repository, origin, source_branch, job, log)
                self._enter(log, SyncState.BRANCH_SYNCED)

                await self.replicate_unmapped_branches(origin, source, log)
                self._enter(log, SyncState.UNMAPPED_REPLICATED)

        async for child in self.discover_submodules(repository, job, log):
            yield child
        self._enter(log, SyncState.SUBMODULES_DISCOVERED)
        self._enter(log, SyncState.DONE)

    async def resolve_target_remote(self, repository: Repository, job: SyncJob, log: BoundLogger) -> Remote:
        """Look up the target remote, point it at the job's target URL and attach the target credential.

        Raises:
            RemoteNotFoundError: If the working tree has no target remote.
        """
        origin = await repository.get_remote(TARGET_REMOTE_NAME)
        if origin is None:
            raise RemoteNotFoundError(TARGET_REMOTE_NAME, str(job.local_folder))

        url = await origin.get_fetch_url()
        if job.target_url:
            push_url = await origin.get_push_url()
            if job.target_url != url or job.target_url != push_url:
                log.info("Re-pointing target remote", remote=TARGET_REMOTE_NAME, url=mask_url(job.target_url))
                await origin.set_url(job.target_url)
            url = job.target_url

        origin.overrides = credential_overrides(url, self.target_credential)
        return origin

    async def resolve_source_remote(self, repository: Repository, source_url: str, log: BoundLogger) -> Remote:
        """Add or update the source remote, attaching the source credential."""
        log.info("Creating source link", url=mask_url(source_url))
        overrides = credential_overrides(source_url, self.source_credential)
        return await repository.add_remote(SOURCE_REMOTE_NAME, source_url, force=True, overrides=overrides)

    async def locate_source_branch(self, source: Remote, branch: str, log: BoundLogger) -> RemoteBranch | None:
        """Find the job's branch on the source and fetch it. Returns None if the source lacks it."""
        log.info("Fetching from source repository", branch=branch)
        source_branch = await source.branches.find_branch(branch)
        if source_branch is None:
            log.info("Failed to find branch on source, skipping branch synchronization", branch=branch)
            return None
        await source.fetch([source_branch])
        return source_branch

    async def sync_branch(self, repository: Repository, origin: Remote, source_branch: RemoteBranch, job: SyncJob, log: BoundLogger) -> None:
        """Merge the source branch into its target branch and push the result under the mapped name.

        The root job always merges into the current checkout. A submodule job only merges when
        its mapped branch already exists on the target; otherwise the branch is created by
        un-mapped branch replication.
        """
        target_branch_name = self.mapper.map(source_branch.name)
        target_branch = await origin.branches.find_branch(target_branch_name)

        if job.is_root:
            active = await repository.active_branch()
            if target_branch is not None:
                log.info("Pulling target branch", branch=target_branch_name)
                await origin.pull(target_branch_name)
            log.info("Merging branch", source=str(source_branch), into=active.name if active else "HEAD")
            await repository.merge(source_branch)
            log.info("Pushing branch", branch=target_branch_name)
            await origin.push_head(target_branch_name)
            return

        if target_branch is None:
            log.info("Target branch does not exist yet, leaving it to un-mapped branch replication", branch=target_branch_name)
            return

        await origin.fetch([target_branch])
        log.info("Checking out branch", branch=str(target_branch))
        await repository.checkout(target_branch, force=True)
        log.info("Merging branch", source=str(source_branch), into=target_branch_name)
        await repository.merge(source_branch, allow_unrelated_histories=True)
        log.info("Pushing branch", branch=target_branch_name)
        await origin.push_head(target_branch_name)

    async def replicate_unmapped_branches(self, origin: Remote, source: Remote, log: BoundLogger) -> list[RemoteBranch]:
        """Fetch the source branches the target lacks and push them under their mapped names, one batch each.

        Returns:
            list[RemoteBranch]: The replicated source branches, sorted by name.
        """
        if self.branch_pattern is None:
            return []
        log.info("Creating un-mapped branches")
        source_branches = await source.branches.list_branches()
        target_branches = await origin.branches.list_branches()
        unmapped = sorted(
            find_unmapped_branches(source_branches, target_branches, self.branch_pattern, self.mapper),
            key=lambda branch: branch.name,
        )
        if not unmapped:
            log.info("No un-mapped branches found")
            return []

        names = [branch.name for branch in unmapped]
        log.info("Fetching branches from source", branches=names)
        await source.fetch(unmapped)
        log.info("Pushing branches to target", branches={name: self.mapper.map(name) for name in names})
        await origin.push(unmapped, self.mapper.map)
        return unmapped

    async def discover_submodules(self, repository: Repository, job: SyncJob, log: BoundLogger) -> AsyncIterator[SyncJob]:
        """Prepare the working tree of every mirrored submodule and yield its job."""
        if not await has_submodules(repository):
            return
        for submodule in await read_submodules(repository):
            if is_truthy_flag(submodule.get(SUBMODULE_IGNORE_MIRROR_KEY)):
                log.debug("Skipping submodule marked to be ignored", submodule=submodule.name)
                continue
            source_url = (submodule.get(SUBMODULE_SOURCE_URL_KEY) or "").strip()
            if not source_url:
                log.warning("Skipping submodule: source-url not yet configured", submodule=submodule.name)
                continue

            await init_submodule(repository, submodule)
            await update_submodule(repository, submodule)
            target_url = await resolve_submodule_url(repository, submodule)
            branch = strip_heads_prefix(submodule.branch) if submodule.branch else job.branch
            log.info("Discovered submodule", submodule=submodule.name, path=submodule.path, branch=branch)
            yield SyncJob(
                name=submodule.name,
                local_folder=(job.local_folder / submodule.path).resolve(),
                source_url=source_url,
                target_url=target_url,
                branch=branch,
            )

    @staticmethod
    def _enter(log: BoundLogger, state: SyncState) -> None:
        log.debug("Job state changed", state=state.value)

"""Access to a git working tree, its remotes and their branches.

The classes in this module are thin wrappers around git commands run through a
``ProcessRunner``. They hold no state of their own besides the working tree
location: remote URLs and branches are read from git on every call.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.git.abc import BranchListingBase
from git_branch_mirror.git.credentials import NO_OVERRIDES, GitConfigOverrides
from git_branch_mirror.git.runner import CommandResult, ProcessRunner
from git_branch_mirror.utils.constants import HEADS_REF_PREFIX, REMOTES_REF_PREFIX
from git_branch_mirror.utils.helpers import mask_url

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


@dataclass(frozen=True)
class LocalBranch:
    """A branch of the local working tree."""

    name: str
    active: bool = False

    @property
    def ref(self) -> str:
        """Fully-qualified reference of the branch."""
        return f"{HEADS_REF_PREFIX}{self.name}"


@dataclass(frozen=True)
class RemoteBranch:
    """A branch as seen on a remote, identified by the remote name and its short name."""

    remote_name: str
    name: str

    @property
    def ref(self) -> str:
        """Fully-qualified reference of the branch on the remote."""
        return f"{HEADS_REF_PREFIX}{self.name}"

    @property
    def tracking_ref(self) -> str:
        """Local remote-tracking reference the branch is fetched into."""
        return f"{REMOTES_REF_PREFIX}{self.remote_name}/{self.name}"

    def __str__(self) -> str:
        return f"{self.remote_name}/{self.name}"


def parse_ls_remote_heads(output: str, remote_name: str) -> list[RemoteBranch]:
    """Parse the output of 'git ls-remote --heads' into remote branches.

    Lines that are not of the form '<sha>\\trefs/heads/<name>' are ignored.
    """
    branches: list[RemoteBranch] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t", 1)
        if len(parts) != 2:
            continue
        ref = parts[1].strip()
        if not ref.startswith(HEADS_REF_PREFIX):
            continue
        name = ref[len(HEADS_REF_PREFIX) :]
        if name:
            branches.append(RemoteBranch(remote_name=remote_name, name=name))
    return branches


class Repository:
    """A git working tree on disk."""

    def __init__(self, local_folder: Path, runner: ProcessRunner) -> None:
        """Initialize the repository with its working tree folder and the runner used for git commands."""
        self.local_folder = Path(local_folder)
        self.runner = runner

    async def git(
        self,
        *args: str,
        overrides: GitConfigOverrides = NO_OVERRIDES,
        tolerate_non_zero_exit: bool = False,
    ) -> CommandResult:
        """Run a git command in the working tree, with per-call configuration overrides placed before the subcommand."""
        command = ["git", *overrides.as_arguments(), *args]
        return await self.runner.run(command, self.local_folder, tolerate_non_zero_exit=tolerate_non_zero_exit)

    @property
    def branches(self) -> "LocalBranchListing":
        """Listing of the branches of the local working tree."""
        return LocalBranchListing(self)

    async def active_branch(self) -> LocalBranch | None:
        """Return the branch currently checked out, or None for a detached HEAD."""
        for branch in await self.branches.list_branches():
            if branch.active:
                return branch
        return None

    async def remote_names(self) -> list[str]:
        """Return the names of the configured remotes."""
        result = await self.git("remote")
        return result.lines

    async def get_remote(self, name: str, overrides: GitConfigOverrides = NO_OVERRIDES) -> "Remote | None":
        """Return the remote with the given name, or None if it is not configured.

        The overrides are attached to every call made against the returned remote.
        """
        if name not in await self.remote_names():
            return None
        return Remote(self, name, overrides)

    async def add_remote(self, name: str, url: str, force: bool = False, overrides: GitConfigOverrides = NO_OVERRIDES) -> "Remote":
        """Add a remote. With force, an existing remote of the same name is re-pointed to the URL instead."""
        if force:
            existing = await self.get_remote(name, overrides)
            if existing is not None:
                await existing.set_url(url)
                return existing
        logger.debug("Adding remote", remote=name, url=mask_url(url), local_folder=str(self.local_folder))
        await self.git("remote", "add", name, url)
        return Remote(self, name, overrides)

    async def merge(self, branch: RemoteBranch, allow_unrelated_histories: bool = False) -> None:
        """Merge a fetched remote branch into the current checkout. Conflicts fail the command."""
        args = ["merge", "--no-edit"]
        if allow_unrelated_histories:
            args.append("--allow-unrelated-histories")
        args.append(branch.tracking_ref)
        await self.git(*args)

    async def checkout(self, branch: RemoteBranch, force: bool = False) -> None:
        """Check out a fetched remote branch as a local branch of the same name, resetting it if it exists."""
        args = ["checkout"]
        if force:
            args.append("--force")
        args.extend(["-B", branch.name, branch.tracking_ref])
        await self.git(*args)


class Remote:
    """A named remote of a repository with independently settable fetch and push URLs."""

    def __init__(self, repository: Repository, name: str, overrides: GitConfigOverrides = NO_OVERRIDES) -> None:
        """Initialize the remote with its repository, its name and the overrides used for network calls."""
        self.repository = repository
        self.name = name
        self.overrides = overrides

    def __repr__(self) -> str:
        return f"Remote(name={self.name!r}, local_folder={str(self.repository.local_folder)!r})"

    @property
    def branches(self) -> "RemoteBranchListing":
        """Listing of the branches currently present on the remote."""
        return RemoteBranchListing(self)

    async def get_fetch_url(self) -> str:
        """Return the fetch URL of the remote."""
        result = await self.repository.git("remote", "get-url", self.name)
        return result.stdout.strip()

    async def get_push_url(self) -> str:
        """Return the push URL of the remote."""
        result = await self.repository.git("remote", "get-url", "--push", self.name)
        return result.stdout.strip()

    async def set_fetch_url(self, url: str) -> None:
        """Set the fetch URL of the remote."""
        await self.repository.git("remote", "set-url", self.name, url)

    async def set_push_url(self, url: str) -> None:
        """Set the push URL of the remote."""
        await self.repository.git("remote", "set-url", "--push", self.name, url)

    async def set_url(self, url: str) -> None:
        """Point both the fetch and the push URL of the remote at the given URL."""
        logger.debug("Setting remote URL", remote=self.name, url=mask_url(url), local_folder=str(self.repository.local_folder))
        await self.set_fetch_url(url)
        await self.set_push_url(url)

    async def fetch(self, branches: Iterable[RemoteBranch]) -> None:
        """Fetch the given branches into their remote-tracking references with a single call."""
        refspecs = [f"+{branch.ref}:{branch.tracking_ref}" for branch in branches]
        if not refspecs:
            return
        await self.repository.git("fetch", self.name, *refspecs, overrides=self.overrides)

    async def push(self, branches: Iterable[RemoteBranch], rename: Callable[[str], str]) -> None:
        """Push fetched branches of another remote to this remote with a single call, renaming each on the way."""
        refspecs = [f"{branch.tracking_ref}:{HEADS_REF_PREFIX}{rename(branch.name)}" for branch in branches]
        if not refspecs:
            return
        await self.repository.git("push", self.name, *refspecs, overrides=self.overrides)

    async def push_head(self, branch_name: str) -> None:
        """Push the current checkout to the named branch of this remote."""
        await self.repository.git("push", self.name, f"HEAD:{HEADS_REF_PREFIX}{branch_name}", overrides=self.overrides)

    async def pull(self, branch_name: str) -> None:
        """Pull the named branch of this remote into the current checkout."""
        await self.repository.git("pull", "--no-rebase", "--no-edit", self.name, branch_name, overrides=self.overrides)


class LocalBranchListing(BranchListingBase):
    """Enumerates the branches of the local working tree."""

    def __init__(self, repository: Repository) -> None:
        """Initialize the listing for a repository."""
        self.repository = repository

    async def list_branches(self, name: str | None = None) -> list[LocalBranch]:
        """List local branches, marking the one checked out as active."""
        pattern = f"{HEADS_REF_PREFIX}{name}" if name else HEADS_REF_PREFIX.rstrip("/")
        result = await self.repository.git("for-each-ref", "--format=%(HEAD)%(refname:short)", pattern)
        branches: list[LocalBranch] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            active = line.startswith("*")
            branches.append(LocalBranch(name=line[1:].strip(), active=active))
        return branches


class RemoteBranchListing(BranchListingBase):
    """Enumerates the branches present on a remote, querying it with the remote's overrides."""

    def __init__(self, remote: Remote) -> None:
        """Initialize the listing for a remote."""
        self.remote = remote

    async def list_branches(self, name: str | None = None) -> list[RemoteBranch]:
        """List the branches of the remote. With a name, only an exact match is returned."""
        args = ["ls-remote", "--heads", self.remote.name]
        if name:
            args.append(f"{HEADS_REF_PREFIX}{name}")
        result = await self.remote.repository.git(*args, overrides=self.remote.overrides)
        branches = parse_ls_remote_heads(result.stdout, self.remote.name)
        if name:
            branches = [branch for branch in branches if branch.name == name]
        return branches

"""Internal data models of the synchronization workflow."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from git_branch_mirror.utils.constants import ROOT_JOB_DISPLAY_NAME


class SyncState(Enum):
    """Steps of the synchronization of a single job, in the order they are reached."""

    START = "start"
    SOURCE_RESOLVED = "source-resolved"
    BRANCH_SYNCED = "branch-synced"
    UNMAPPED_REPLICATED = "unmapped-replicated"
    SUBMODULES_DISCOVERED = "submodules-discovered"
    DONE = "done"


@dataclass(frozen=True)
class SyncJob:
    """One repository node of the tree to synchronize.

    A job without a name is the root job. Submodule jobs carry the submodule's name and the
    URL their target remote is re-pointed to.
    """

    name: str | None
    local_folder: Path
    source_url: str | None
    target_url: str | None
    branch: str | None

    @property
    def is_root(self) -> bool:
        """Whether this is the job of the top-level repository."""
        return self.name is None

    @property
    def display_name(self) -> str:
        """Name used to prefix log output of the job."""
        return self.name if self.name is not None else ROOT_JOB_DISPLAY_NAME

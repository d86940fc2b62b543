"""Contains results of application execution."""

from git_branch_mirror.synchronize.exceptions import JobSynchronizationError


class SyncRunResult:
    """Contains results of a traversal over the repository and submodule tree."""

    def __init__(self, processed_jobs: list[str] | None = None, errors: list[JobSynchronizationError] | None = None) -> None:
        """Initialize the result with the names of the synchronized jobs and the failures that were skipped over."""
        self.processed_jobs = processed_jobs or []
        self.errors = errors or []

    @property
    def succeeded(self) -> bool:
        """Whether every job of the run was synchronized."""
        return not self.errors

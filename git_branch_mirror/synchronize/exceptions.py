"""Exceptions raised by the traversal over the repository and submodule tree."""

from git_branch_mirror.exceptions import GitBranchMirrorError


class JobSynchronizationError(GitBranchMirrorError):
    """Raised when the synchronization of a single job fails.

    The original error is kept as ``__cause__`` and in ``error``.
    """

    def __init__(self, job_name: str, local_folder: str, error: Exception) -> None:
        """Initializes the exception with the failing job and its underlying error."""
        super().__init__(f"[{job_name}] {error}")
        self.job_name = job_name
        self.local_folder = local_folder
        self.error = error


class SubmoduleCycleError(GitBranchMirrorError):
    """Raised when a working tree is reached a second time during one run."""

    def __init__(self, job_name: str, local_folder: str) -> None:
        """Initializes the exception with the job that revisited a working tree."""
        super().__init__(f"[{job_name}] Submodule cycle detected: {local_folder} was already synchronized in this run")
        self.job_name = job_name
        self.local_folder = local_folder

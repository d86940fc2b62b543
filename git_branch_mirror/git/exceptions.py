"""Exceptions raised while invoking git or resolving repository state."""

from git_branch_mirror.exceptions import GitBranchMirrorError


class CommandExecutionError(GitBranchMirrorError):
    """Raised when a git command exits with a non-zero status and the call is not tolerant."""

    def __init__(self, command: list[str], exit_code: int, stdout: str = "", stderr: str = "") -> None:
        """Initializes the exception with the failed command line and its captured output."""
        message = f"Failed executing command line '{' '.join(command)}' (Exit code: {exit_code})"
        detail = stderr.strip() or stdout.strip()
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class RemoteNotFoundError(GitBranchMirrorError):
    """Raised when a remote required for synchronization is not configured in a working tree."""

    def __init__(self, remote_name: str, local_folder: str) -> None:
        """Initializes the exception with the remote name and the working tree it is missing from."""
        super().__init__(f"Cannot find remote {remote_name} in {local_folder}")
        self.remote_name = remote_name
        self.local_folder = local_folder

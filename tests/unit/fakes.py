"""Test doubles for running git without a repository."""

from pathlib import Path

from git_branch_mirror.git.exceptions import CommandExecutionError
from git_branch_mirror.git.runner import CommandResult, ProcessRunner


def strip_git_options(command: list[str]) -> list[str]:
    """Drop the leading 'git' and any '-c key=value' overrides from a recorded command."""
    args = command[1:] if command and command[0] == "git" else list(command)
    while len(args) >= 2 and args[0] == "-c":
        args = args[2:]
    return args


def ls_remote_output(*names: str) -> str:
    """Build 'git ls-remote --heads' output listing the given branch names."""
    return "".join(f"{index:040x}\trefs/heads/{name}\n" for index, name in enumerate(names, start=1))


class FakeProcessRunner(ProcessRunner):
    """Records git invocations and answers them with canned results.

    Responses are matched on a prefix of the git arguments (without 'git' and '-c' overrides),
    optionally restricted to a working directory. The longest matching prefix wins, later
    registrations win ties, and commands without a response succeed with empty output.
    """

    def __init__(self) -> None:
        """Initialize the runner with no recorded calls and no responses."""
        self.calls: list[tuple[list[str], Path]] = []
        self.responses: list[tuple[tuple[str, ...], Path | None, CommandResult]] = []

    def respond(self, *prefix: str, stdout: str = "", stderr: str = "", exit_code: int = 0, cwd: Path | None = None) -> None:
        """Register the result returned for commands starting with the given arguments."""
        self.responses.append((prefix, Path(cwd) if cwd is not None else None, CommandResult(exit_code, stdout, stderr)))

    async def run(self, command: list[str], cwd: Path | str, tolerate_non_zero_exit: bool = False) -> CommandResult:
        """Record the command and return the best matching canned result."""
        self.calls.append((list(command), Path(cwd)))
        args = strip_git_options(command)
        best: CommandResult | None = None
        best_length = -1
        for prefix, response_cwd, result in self.responses:
            if response_cwd is not None and response_cwd != Path(cwd):
                continue
            if tuple(args[: len(prefix)]) == prefix and len(prefix) >= best_length:
                best = result
                best_length = len(prefix)
        result = best or CommandResult(0, "", "")
        if result.exit_code != 0 and not tolerate_non_zero_exit:
            raise CommandExecutionError(list(command), result.exit_code, result.stdout, result.stderr)
        return result

    def git_calls(self, cwd: Path | None = None) -> list[list[str]]:
        """Return the recorded git arguments, optionally only those run in a working directory."""
        return [strip_git_options(command) for command, call_cwd in self.calls if cwd is None or call_cwd == Path(cwd)]

    def commands(self, cwd: Path | None = None) -> list[list[str]]:
        """Return the full recorded command lines, optionally only those run in a working directory."""
        return [command for command, call_cwd in self.calls if cwd is None or call_cwd == Path(cwd)]

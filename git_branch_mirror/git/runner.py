"""Runs git as a subprocess and captures its exit code and output.

Every git invocation of the application goes through ``ProcessRunner.run``. The
call is awaited to completion, which makes the subprocess the only suspension
point of a synchronization step.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.git.exceptions import CommandExecutionError
from git_branch_mirror.utils.constants import HTTP_EXTRA_HEADER_KEY, MASKED_CREDENTIAL, URL_INSTEAD_OF_KEY_TEMPLATE
from git_branch_mirror.utils.helpers import mask_url

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore

INSTEAD_OF_SEPARATOR = ".insteadOf="


@dataclass(frozen=True)
class CommandResult:
    """Exit code and captured output of a finished command."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def lines(self) -> list[str]:
        """Non-empty, stripped lines of standard output."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def mask_command(command: list[str]) -> list[str]:
    """Return a copy of a command line with credentials hidden, for logging and error messages."""
    masked: list[str] = []
    for argument in command:
        if argument.startswith(f"{HTTP_EXTRA_HEADER_KEY}="):
            masked.append(f"{HTTP_EXTRA_HEADER_KEY}={MASKED_CREDENTIAL}")
        elif argument.startswith("url.") and INSTEAD_OF_SEPARATOR in argument:
            base, original = argument[len("url.") :].split(INSTEAD_OF_SEPARATOR, 1)
            masked.append(f"{URL_INSTEAD_OF_KEY_TEMPLATE.format(base=mask_url(base))}={original}")
        elif "://" in argument:
            masked.append(mask_url(argument))
        else:
            masked.append(argument)
    return masked


class ProcessRunner:
    """Executes command lines in a working directory."""

    async def run(self, command: list[str], cwd: Path | str, tolerate_non_zero_exit: bool = False) -> CommandResult:
        """Run a command to completion.

        Args:
            command (list[str]): The executable followed by its arguments.
            cwd (Path | str): The working directory to run the command in.
            tolerate_non_zero_exit (bool): Return the result instead of raising when the exit code is not zero.

        Raises:
            CommandExecutionError: If the command exits with a non-zero status and the call is not tolerant.

        Returns:
            CommandResult: The exit code and decoded output of the command.
        """
        logger.debug("Running command", cwd=str(cwd), command=" ".join(mask_command(command)))
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout_bytes, stderr_bytes = await process.communicate()
        exit_code = process.returncode if process.returncode is not None else -1
        result = CommandResult(
            exit_code=exit_code,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )
        if result.stdout.strip():
            logger.debug("Command output", stdout=result.stdout.strip())
        if exit_code != 0:
            if tolerate_non_zero_exit:
                logger.warning(
                    "Command exited with a non-zero status, continuing",
                    command=" ".join(mask_command(command)),
                    exit_code=exit_code,
                    stderr=result.stderr.strip(),
                )
                return result
            raise CommandExecutionError(mask_command(command), exit_code, result.stdout, result.stderr)
        return result

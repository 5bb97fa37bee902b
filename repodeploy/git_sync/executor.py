"""Command execution backends for Git operations."""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from git import cmd
from git.exc import GitCommandError, GitCommandNotFound


class CommandExecutionError(Exception):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(
        self,
        command: str,
        arguments: Sequence[str],
        working_directory: Union[str, Path],
        status: Optional[int] = None,
        stderr: str = ""
    ):
        self.command = command
        self.arguments = list(arguments)
        self.working_directory = Path(working_directory)
        self.status = status
        self.stderr = stderr.strip() if stderr else ""

        detail = f" (exit status {status})" if status is not None else ""
        message = f"'{command} {' '.join(self.arguments)}' failed in {self.working_directory}{detail}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class CommandExecutor:
    """
    Capability for running an external command.

    Implementations run ``command`` with ``arguments`` in ``working_directory``
    and return captured standard output, raising ``CommandExecutionError`` on a
    non-zero exit or when the command cannot be executed at all.
    """

    def execute(self, command: str, arguments: Sequence[str], working_directory: Union[str, Path]) -> str:
        raise NotImplementedError


class GitPythonExecutor(CommandExecutor):
    """Runs commands through GitPython's process wrapper."""

    def __init__(self):
        self.logger = logging.getLogger('repodeploy.git_sync.executor')

    def execute(self, command: str, arguments: Sequence[str], working_directory: Union[str, Path]) -> str:
        working_directory = Path(working_directory)
        argv = [command, *arguments]
        self.logger.debug(f"Running {' '.join(argv)} in {working_directory}")

        # GitPython falls back to the process cwd when the directory cannot be entered
        if not working_directory.is_dir():
            raise CommandExecutionError(
                command, arguments, working_directory,
                stderr=f"working directory {working_directory} does not exist or is not a directory"
            )

        git_cmd = cmd.Git(str(working_directory))
        try:
            return git_cmd.execute(argv, with_extended_output=False)
        except GitCommandNotFound as e:
            raise CommandExecutionError(command, arguments, working_directory, stderr=str(e)) from e
        except GitCommandError as e:
            raise CommandExecutionError(
                command, arguments, working_directory,
                status=e.status if isinstance(e.status, int) else None,
                stderr=e.stderr or ""
            ) from e

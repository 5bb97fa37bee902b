"""In-memory command executor used by the repodeploy test suite."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from repodeploy.git_sync.executor import CommandExecutionError, CommandExecutor


class RecordingExecutor(CommandExecutor):
    """
    Records every command instead of running it.

    ``outputs`` and ``failures`` are keyed either by the full argument string
    (``"rev-parse HEAD"``) or by the git subcommand alone (``"fetch"``). A
    ``clone`` creates ``clone_creates`` so the checkout exists afterwards.
    """

    def __init__(
        self,
        outputs: Optional[Dict[str, str]] = None,
        failures: Iterable[str] = (),
        clone_creates: Optional[Path] = None
    ):
        self.outputs = outputs or {}
        self.failures = set(failures)
        self.clone_creates = clone_creates
        self.calls = []

    def execute(self, command, arguments, working_directory):
        arguments = list(arguments)
        self.calls.append((command, arguments, Path(working_directory)))

        full_key = " ".join(arguments)
        subcommand = arguments[0]
        if full_key in self.failures or subcommand in self.failures:
            raise CommandExecutionError(command, arguments, working_directory, status=128, stderr=f"fatal: {subcommand} failed")

        if subcommand == "clone" and self.clone_creates is not None:
            self.clone_creates.mkdir(parents=True, exist_ok=True)

        if full_key in self.outputs:
            return self.outputs[full_key]
        return self.outputs.get(subcommand, "")

    def subcommands(self) -> List[str]:
        return [arguments[0] for _, arguments, _ in self.calls]

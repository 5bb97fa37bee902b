"""Managed local checkouts of remote Git repositories."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import (
    BranchQueryError, CheckoutError, CloneError, DivergenceQueryError, FetchError,
    HistoryQueryError, PullError, RevisionQueryError
)
from ..platform import get_git_executable
from .executor import CommandExecutionError, CommandExecutor, GitPythonExecutor

GIT_SUFFIX = ".git"


class RepositoryHandle:
    """
    A local checkout of a remote repository.

    The deployment path is ``destination_root / name`` and is fixed when the
    handle is created. Nothing about branch or commit state is cached; every
    query runs git against the deployment path.

    Use ``clone_repository()`` to obtain a handle whose checkout is
    guaranteed to exist.
    """

    def __init__(
        self,
        remote: str,
        destination_root: Union[str, Path],
        executor: Optional[CommandExecutor] = None,
        git_executable: Optional[str] = None
    ):
        if not remote:
            raise ValueError("remote must be a non-empty repository identifier")

        self._remote = remote
        self._destination_root = Path(destination_root)
        self.executor = executor or GitPythonExecutor()
        self.git_executable = git_executable or get_git_executable()
        self.logger = logging.getLogger('repodeploy.git_sync')

        if not self.name:
            raise ValueError(f"cannot derive a repository name from {remote!r}")

        self._deployment_path = self._destination_root / self.name

    def __repr__(self) -> str:
        return f"RepositoryHandle(remote={self._remote!r}, deployment_path={str(self._deployment_path)!r})"

    @property
    def remote(self) -> str:
        return self._remote

    @property
    def destination_root(self) -> Path:
        return self._destination_root

    @property
    def deployment_path(self) -> Path:
        return self._deployment_path

    @property
    def path(self) -> str:
        """Repository path after the last ':' of the remote, e.g. ``org/proj``."""
        return _strip_git_suffix(self._remote.split(":")[-1])

    @property
    def name(self) -> str:
        """Short repository name, the last '/' segment of the remote."""
        return _strip_git_suffix(self._remote.split("/")[-1])

    def exists(self) -> bool:
        """Check whether anything currently exists at the deployment path."""
        try:
            return self._deployment_path.exists()
        except OSError:
            return False

    def _git(self, arguments: Sequence[str], working_directory: Optional[Path] = None) -> str:
        return self.executor.execute(
            self.git_executable,
            arguments,
            working_directory or self._deployment_path
        )

    def clone(self) -> None:
        """Clone the remote into the destination root unless the checkout already exists."""
        if self.exists():
            self.logger.debug(f"Repository {self.name} already present at {self._deployment_path}, skipping clone")
            return

        try:
            self._destination_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Cannot create destination root {self._destination_root}: {e}")
            raise CloneError(self.name, cause=e) from e

        self.logger.info(f"Cloning {self._remote} into {self._destination_root}")
        try:
            self._git(["clone", self._remote], self._destination_root)
        except CommandExecutionError as e:
            self.logger.error(f"Git clone failed for {self.name}: {e}")
            raise CloneError(self.name, cause=e) from e

        self.logger.info(f"Repository {self.name} cloned to {self._deployment_path}")

    def fetch(self) -> None:
        """Fetch all branches from the remote."""
        try:
            self._git(["fetch"])
        except CommandExecutionError as e:
            self.logger.error(f"Fetch failed for {self.name}: {e}")
            raise FetchError(self.name, cause=e) from e

    def checkout(self, branch: str) -> None:
        """Check out ``branch`` in the working copy."""
        try:
            self._git(["checkout", branch])
        except CommandExecutionError as e:
            self.logger.error(f"Checkout of {branch} failed for {self.name}: {e}")
            raise CheckoutError(self.name, branch=branch, cause=e) from e

    def pull(self) -> None:
        """Pull remote changes into the current branch."""
        try:
            self._git(["pull"])
        except CommandExecutionError as e:
            self.logger.error(f"Pull failed for {self.name}: {e}")
            raise PullError(self.name, cause=e) from e

    def sync(self, branch: str) -> None:
        """
        Bring the checkout up to date with ``branch`` on the remote.

        Runs fetch, checkout and pull in that order and stops at the first
        failing step, re-raising its error. Steps are never retried and
        partial progress is left as git left it.

        Raises:
            FetchError, CheckoutError, PullError
        """
        self.logger.info(f"Synchronizing {self.name} to branch {branch}")
        self.fetch()
        self.checkout(branch)
        self.pull()
        self.logger.info(f"Repository {self.name} synchronized to branch {branch}")

    def branch(self) -> str:
        """Name of the currently checked out branch (``HEAD`` when detached)."""
        try:
            output = self._git(["rev-parse", "--abbrev-ref", "HEAD"])
        except CommandExecutionError as e:
            raise BranchQueryError(self.name, cause=e) from e
        return output.strip()

    def commit_id(self) -> str:
        """Full id of the checked out revision."""
        try:
            output = self._git(["rev-parse", "HEAD"])
        except CommandExecutionError as e:
            raise RevisionQueryError(self.name, cause=e) from e
        return output.strip()

    def commits(self) -> List[str]:
        """Short ids of the current branch history, newest first."""
        try:
            output = self._git(["log", "--pretty=format:%h"])
        except CommandExecutionError as e:
            raise HistoryQueryError(self.name, cause=e) from e

        # A repository without commits has empty output and no history
        return [line.strip() for line in output.splitlines() if line.strip()]

    def diverged(self, from_ref: str, to_ref: str) -> bool:
        """
        Check whether ``to_ref`` differs from its merge base with ``from_ref``.

        Any diff output counts as divergence. If git fails the comparison is
        unknown and a ``DivergenceQueryError`` is raised with ``diverged``
        set to True; callers that must not act on an unknown state can use
        that value as their answer.
        """
        try:
            output = self._git(["diff", f"{from_ref}...{to_ref}"])
        except CommandExecutionError as e:
            self.logger.warning(f"Could not compare {from_ref}...{to_ref} in {self.name}, assuming diverged")
            raise DivergenceQueryError(self.name, from_ref, to_ref, cause=e) from e
        return output != ""


def clone_repository(
    remote: str,
    destination_root: Union[str, Path],
    executor: Optional[CommandExecutor] = None,
    git_executable: Optional[str] = None
) -> RepositoryHandle:
    """
    Create a handle for ``remote`` under ``destination_root``, cloning it if absent.

    An existing entry at the deployment path is reused as is, so calling this
    twice performs at most one clone.

    Raises:
        ValueError: remote is empty
        CloneError: the clone could not be performed
    """
    handle = RepositoryHandle(remote, destination_root, executor=executor, git_executable=git_executable)
    handle.clone()
    return handle


def _strip_git_suffix(segment: str) -> str:
    if segment.endswith(GIT_SUFFIX):
        return segment[:-len(GIT_SUFFIX)]
    return segment

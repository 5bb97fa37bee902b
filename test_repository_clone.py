#!/usr/bin/env python3
"""
Tests for clone-if-absent construction of repository handles.

Uses a recording executor so no git processes are started.
"""

import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from repodeploy.errors import CloneError
from repodeploy.git_sync.executor import CommandExecutionError
from repodeploy.git_sync.repository import RepositoryHandle, clone_repository
from fake_git import RecordingExecutor

REMOTE = "git@host:org/proj.git"


def test_clone_when_absent():
    """A missing checkout is cloned from the destination root."""
    print("Testing clone when checkout is absent")

    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        executor = RecordingExecutor(clone_creates=root / "proj")

        handle = clone_repository(REMOTE, root, executor=executor, git_executable="git")

        assert executor.calls == [("git", ["clone", REMOTE], root)]
        assert handle.exists()
        assert handle.deployment_path == root / "proj"


def test_exists_false_before_clone_true_after():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        executor = RecordingExecutor(clone_creates=root / "proj")
        handle = RepositoryHandle(REMOTE, root, executor=executor)

        assert handle.exists() is False
        handle.clone()
        assert handle.exists() is True


def test_existing_checkout_is_not_cloned():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        (root / "proj").mkdir()
        executor = RecordingExecutor()

        handle = clone_repository(REMOTE, root, executor=executor)

        assert executor.calls == []
        assert handle.exists()


def test_any_existing_entry_counts():
    """A plain file at the deployment path is enough to skip the clone."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        (root / "proj").write_text("not a checkout")
        executor = RecordingExecutor()

        handle = clone_repository(REMOTE, root, executor=executor)

        assert handle.exists()
        assert executor.calls == []


def test_clone_is_idempotent():
    """Two constructions for the same remote clone at most once."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        executor = RecordingExecutor(clone_creates=root / "proj")

        first = clone_repository(REMOTE, root, executor=executor)
        second = clone_repository(REMOTE, root, executor=executor)

        assert executor.subcommands() == ["clone"]
        assert first.deployment_path == second.deployment_path


def test_missing_destination_root_is_created():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir) / "deploy" / "apps"
        executor = RecordingExecutor(clone_creates=root / "proj")

        clone_repository(REMOTE, root, executor=executor)

        assert root.is_dir()
        assert executor.calls[0][2] == root


def test_clone_failure_raises_clone_error():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        executor = RecordingExecutor(failures=["clone"])

        with pytest.raises(CloneError) as exc_info:
            clone_repository(REMOTE, root, executor=executor)

        error = exc_info.value
        assert error.repository == "proj"
        assert error.error_code == "CLONE_FAILED"
        assert "proj" in str(error)
        assert isinstance(error.cause, CommandExecutionError)
        assert not (root / "proj").exists()


def test_clone_error_response():
    error = CloneError("proj", cause=RuntimeError("boom"))
    response = error.to_response().to_dict()

    assert response["error_code"] == "CLONE_FAILED"
    assert response["category"] == "repository_setup"
    assert response["context"]["repository"] == "proj"
    assert response["context"]["cause"] == "boom"


def test_exists_treats_probe_errors_as_absent():
    handle = RepositoryHandle(REMOTE, "/work/", executor=RecordingExecutor())

    with patch.object(type(handle.deployment_path), "exists", side_effect=PermissionError("denied")):
        assert handle.exists() is False


if __name__ == "__main__":
    tests = [
        test_clone_when_absent,
        test_exists_false_before_clone_true_after,
        test_existing_checkout_is_not_cloned,
        test_any_existing_entry_counts,
        test_clone_is_idempotent,
        test_missing_destination_root_is_created,
        test_clone_failure_raises_clone_error,
        test_clone_error_response,
        test_exists_treats_probe_errors_as_absent
    ]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"  ✓ {test.__name__}")
        except Exception as e:
            failed += 1
            print(f"  ✗ {test.__name__} failed: {e}")
    sys.exit(0 if failed == 0 else 1)

#!/usr/bin/env python3
"""
Test state queries on a managed checkout: branch, revision, history and
divergence between references.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from repodeploy.errors import BranchQueryError, DivergenceQueryError, HistoryQueryError, RevisionQueryError
from repodeploy.git_sync.repository import RepositoryHandle
from fake_git import RecordingExecutor


def create_handle(outputs=None, failures=()) -> RepositoryHandle:
    executor = RecordingExecutor(outputs=outputs, failures=failures)
    return RepositoryHandle("git@host:org/proj.git", "/work/", executor=executor, git_executable="git")


def test_branch_is_trimmed():
    handle = create_handle(outputs={"rev-parse --abbrev-ref HEAD": "  release/1.2\n"})

    assert handle.branch() == "release/1.2"
    assert handle.executor.calls == [("git", ["rev-parse", "--abbrev-ref", "HEAD"], Path("/work/proj"))]


def test_branch_failure():
    handle = create_handle(failures=["rev-parse --abbrev-ref HEAD"])

    with pytest.raises(BranchQueryError) as exc_info:
        handle.branch()
    assert exc_info.value.error_code == "BRANCH_QUERY_FAILED"


def test_commit_id_is_trimmed():
    commit = "3f786850e387550fdab836ed7e6dc881de23001b"
    handle = create_handle(outputs={"rev-parse HEAD": f"{commit}\n"})

    assert handle.commit_id() == commit


def test_commit_id_failure():
    handle = create_handle(failures=["rev-parse HEAD"])

    with pytest.raises(RevisionQueryError):
        handle.commit_id()


def test_commits_newest_first():
    """Three commits give three trimmed short ids in log order."""
    handle = create_handle(outputs={"log": "a1b2c3d\n 9f8e7d6 \n0011223"})

    assert handle.commits() == ["a1b2c3d", "9f8e7d6", "0011223"]
    assert handle.executor.calls[0][1] == ["log", "--pretty=format:%h"]


def test_commits_empty_history():
    handle = create_handle(outputs={"log": ""})

    assert handle.commits() == []


def test_commits_failure():
    handle = create_handle(failures=["log"])

    with pytest.raises(HistoryQueryError):
        handle.commits()


def test_not_diverged_on_empty_diff():
    handle = create_handle(outputs={"diff": ""})

    assert handle.diverged("main", "origin/main") is False
    assert handle.executor.calls[0][1] == ["diff", "main...origin/main"]


def test_diverged_on_any_diff_output():
    diff = "diff --git a/app.py b/app.py\n--- a/app.py\n+++ b/app.py\n@@ -1 +1 @@\n-a\n+b"
    handle = create_handle(outputs={"diff": diff})

    assert handle.diverged("main", "release") is True


def test_divergence_failure_assumes_diverged():
    handle = create_handle(failures=["diff"])

    with pytest.raises(DivergenceQueryError) as exc_info:
        handle.diverged("main", "missing")

    error = exc_info.value
    assert error.diverged is True
    assert error.from_ref == "main"
    assert error.to_ref == "missing"
    assert "main...missing" in str(error)


def test_queries_are_not_cached():
    handle = create_handle(outputs={"rev-parse HEAD": "abc"})

    handle.commit_id()
    handle.executor.outputs["rev-parse HEAD"] = "def"

    assert handle.commit_id() == "def"
    assert len(handle.executor.calls) == 2


if __name__ == "__main__":
    tests = [obj for name, obj in sorted(globals().items()) if name.startswith("test_") and callable(obj)]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"  ✓ {test.__name__}")
        except Exception as e:
            failed += 1
            print(f"  ✗ {test.__name__} failed: {e}")
    sys.exit(0 if failed == 0 else 1)

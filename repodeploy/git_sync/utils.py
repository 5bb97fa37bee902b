"""Utility classes and functions for Git synchronization."""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass
class GitSyncResult:
    """Result of a Git synchronization operation."""
    success: bool
    message: str
    operation: str
    repository: Optional[str] = None
    error_code: Optional[str] = None
    branch_used: Optional[str] = None
    commit_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def create_git_sync_result(
    success: bool,
    message: str,
    operation: str,
    repository: Optional[str] = None,
    error_code: Optional[str] = None,
    branch_used: Optional[str] = None,
    commit_id: Optional[str] = None
) -> GitSyncResult:
    """
    Helper function to create GitSyncResult instances.

    Args:
        success: Whether the operation was successful
        message: Descriptive message about the operation result
        operation: Name of the operation that was performed
        repository: Short name of the repository involved
        error_code: Optional error code for failed operations
        branch_used: Optional branch name that was used in the operation
        commit_id: Revision checked out after the operation, when known

    Returns:
        GitSyncResult instance with all fields populated
    """
    return GitSyncResult(
        success=success,
        message=message,
        operation=operation,
        repository=repository,
        error_code=error_code,
        branch_used=branch_used,
        commit_id=commit_id
    )

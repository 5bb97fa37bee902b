"""
repodeploy - keep local checkouts of remote Git repositories up to date.

This package clones repositories under a destination root, synchronizes them
to a branch (fetch, checkout, pull) and answers questions about their state.
"""

__version__ = "1.0.0"
__description__ = "Local checkout synchronization for deployment tooling"

from .errors import (
    RepositoryError, CloneError, FetchError, CheckoutError, PullError,
    BranchQueryError, RevisionQueryError, HistoryQueryError, DivergenceQueryError
)
from .git_sync import RepositoryHandle, clone_repository

__all__ = [
    "RepositoryHandle",
    "clone_repository",
    "RepositoryError",
    "CloneError",
    "FetchError",
    "CheckoutError",
    "PullError",
    "BranchQueryError",
    "RevisionQueryError",
    "HistoryQueryError",
    "DivergenceQueryError"
]

"""Error types for repository deployment operations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional


class ErrorCategory(Enum):
    """Categories of errors for structured error handling."""
    REPOSITORY_SETUP = "repository_setup"
    SYNCHRONIZATION = "synchronization"
    STATE_QUERY = "state_query"


@dataclass
class ErrorResponse:
    """Standardized error response format for repository operations."""
    error: str
    error_code: str
    message: str
    timestamp: str
    category: str
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error response to dictionary format."""
        result = {
            "error": self.error,
            "error_code": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp,
            "category": self.category
        }
        if self.context:
            result["context"] = self.context
        return result


class RepositoryError(Exception):
    """
    Base class for failures of a Git operation on a managed repository.

    Every subclass corresponds to exactly one operation, so callers can tell
    which step failed from the type alone. The underlying
    ``CommandExecutionError`` is kept in ``cause``.
    """

    operation = "repository"
    error_code = "REPOSITORY_ERROR"
    category = ErrorCategory.REPOSITORY_SETUP
    summary = "repository operation failed"

    def __init__(self, repository: str, branch: Optional[str] = None, cause: Optional[Exception] = None):
        self.repository = repository
        self.branch = branch
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        target = f"{self.repository}:{self.branch}" if self.branch else self.repository
        return f"{self.summary}: {target}"

    def to_response(self) -> ErrorResponse:
        """Build an ErrorResponse describing this failure."""
        context = {
            "operation": self.operation,
            "repository": self.repository,
        }
        if self.branch:
            context["branch"] = self.branch
        if self.cause is not None:
            context["cause"] = str(self.cause)

        return ErrorResponse(
            error=f"{self.operation} failed",
            error_code=self.error_code,
            message=str(self),
            timestamp=datetime.now().isoformat(),
            category=self.category.value,
            context=context
        )


class CloneError(RepositoryError):
    operation = "clone"
    error_code = "CLONE_FAILED"
    summary = "could not clone repo"


class FetchError(RepositoryError):
    operation = "fetch"
    error_code = "FETCH_FAILED"
    category = ErrorCategory.SYNCHRONIZATION
    summary = "could not fetch repo data"


class CheckoutError(RepositoryError):
    operation = "checkout"
    error_code = "CHECKOUT_FAILED"
    category = ErrorCategory.SYNCHRONIZATION
    summary = "could not checkout repo branch"


class PullError(RepositoryError):
    operation = "pull"
    error_code = "PULL_FAILED"
    category = ErrorCategory.SYNCHRONIZATION
    summary = "could not pull repo changes"


class BranchQueryError(RepositoryError):
    operation = "branch_query"
    error_code = "BRANCH_QUERY_FAILED"
    category = ErrorCategory.STATE_QUERY
    summary = "could not get git branch"


class RevisionQueryError(RepositoryError):
    operation = "revision_query"
    error_code = "REVISION_QUERY_FAILED"
    category = ErrorCategory.STATE_QUERY
    summary = "could not get git revision id"


class HistoryQueryError(RepositoryError):
    operation = "history_query"
    error_code = "HISTORY_QUERY_FAILED"
    category = ErrorCategory.STATE_QUERY
    summary = "could not get git revision ids"


class DivergenceQueryError(RepositoryError):
    """
    Raised when two references could not be compared.

    ``diverged`` is always True: a comparison that could not be made is
    treated as a divergence.
    """

    operation = "divergence_query"
    error_code = "DIVERGENCE_QUERY_FAILED"
    category = ErrorCategory.STATE_QUERY
    summary = "could not compare revisions"

    def __init__(self, repository: str, from_ref: str, to_ref: str, cause: Optional[Exception] = None):
        self.from_ref = from_ref
        self.to_ref = to_ref
        self.diverged = True
        super().__init__(repository, cause=cause)

    def _describe(self) -> str:
        return f"{self.summary} {self.from_ref}...{self.to_ref} for {self.repository}"


def log_repository_error(error: RepositoryError, logger: Optional[logging.Logger] = None) -> None:
    """Log a RepositoryError with its structured context."""
    logger = logger or logging.getLogger('repodeploy.error_handler')
    logger.error(
        str(error),
        extra={
            'operation': error.operation,
            'error_code': error.error_code,
            'repository': error.repository,
            'branch': error.branch
        }
    )

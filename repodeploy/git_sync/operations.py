"""Caller-facing repository operations that report results instead of raising."""

import logging
from typing import Dict, Any, Optional

from ..config import Config
from ..errors import DivergenceQueryError, RepositoryError, log_repository_error
from .executor import CommandExecutor
from .repository import RepositoryHandle, clone_repository
from .utils import GitSyncResult, create_git_sync_result


def open_repository(remote: str, config: Config, executor: Optional[CommandExecutor] = None) -> RepositoryHandle:
    """
    Open the checkout of ``remote`` under the configured destination root.

    The repository is cloned first if its deployment path does not exist.

    Raises:
        CloneError: the repository was absent and could not be cloned
    """
    return clone_repository(
        remote,
        config.destination_root,
        executor=executor,
        git_executable=config.git_executable
    )


def sync_repository(handle: RepositoryHandle, branch: str) -> GitSyncResult:
    """
    Synchronize ``handle`` to ``branch`` and describe the outcome.

    The failing step's error code is reported as is; nothing is retried.
    """
    logger = logging.getLogger('repodeploy.git_sync')

    try:
        handle.sync(branch)
    except RepositoryError as e:
        log_repository_error(e, logger)
        return create_git_sync_result(
            success=False,
            message=str(e),
            operation="sync_repository",
            repository=handle.name,
            error_code=e.error_code,
            branch_used=branch
        )

    try:
        commit_id = handle.commit_id()
    except RepositoryError as e:
        logger.warning(f"Synchronized {handle.name} but could not read the revision: {e}")
        commit_id = None

    return create_git_sync_result(
        success=True,
        message=f"Repository {handle.name} synchronized to {branch}",
        operation="sync_repository",
        repository=handle.name,
        branch_used=branch,
        commit_id=commit_id
    )


def get_repository_status(handle: RepositoryHandle) -> Dict[str, Any]:
    """
    Get the current state of a managed checkout.

    Returns:
        Dictionary with identity, location, branch and revision. Query
        failures leave the field as None and are reported in ``last_error``.
    """
    status = {
        'name': handle.name,
        'path': handle.path,
        'remote': handle.remote,
        'deployment_path': str(handle.deployment_path),
        'exists': handle.exists(),
        'branch': None,
        'commit_id': None,
        'last_error': None
    }

    if not status['exists']:
        status['last_error'] = f"No checkout at {handle.deployment_path}"
        return status

    try:
        status['branch'] = handle.branch()
        status['commit_id'] = handle.commit_id()
    except RepositoryError as e:
        status['last_error'] = e.to_response().to_dict()

    return status


def check_divergence(handle: RepositoryHandle, from_ref: str, to_ref: str) -> Dict[str, Any]:
    """
    Compare two references, treating a failed comparison as diverged.

    Returns:
        Dictionary with ``diverged`` and, on failure, ``error_code`` and
        ``message``.
    """
    result = {
        'repository': handle.name,
        'from_ref': from_ref,
        'to_ref': to_ref,
        'diverged': True,
        'error_code': None,
        'message': None
    }

    try:
        result['diverged'] = handle.diverged(from_ref, to_ref)
    except DivergenceQueryError as e:
        result['diverged'] = e.diverged
        result['error_code'] = e.error_code
        result['message'] = str(e)

    return result

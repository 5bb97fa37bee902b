"""Git checkout management for repodeploy."""

from .executor import CommandExecutionError, CommandExecutor, GitPythonExecutor
from .operations import check_divergence, get_repository_status, open_repository, sync_repository
from .repository import RepositoryHandle, clone_repository
from .utils import GitSyncResult, create_git_sync_result

__all__ = [
    'CommandExecutionError',
    'CommandExecutor',
    'GitPythonExecutor',
    'RepositoryHandle',
    'clone_repository',
    'open_repository',
    'sync_repository',
    'get_repository_status',
    'check_divergence',
    'GitSyncResult',
    'create_git_sync_result'
]

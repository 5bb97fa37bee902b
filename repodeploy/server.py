"""MCP server exposing repository deployment operations."""

import logging
import sys
from typing import List, Optional, Union

from mcp.server.fastmcp import FastMCP

from .config import Config, load_configuration, validate_configuration
from .errors import CloneError, RepositoryError
from .git_sync import check_divergence, get_repository_status, open_repository, sync_repository
from .git_sync.executor import CommandExecutor


def setup_logging(config: Config) -> None:
    """Setup logging configuration with structured logging."""
    class StructuredFormatter(logging.Formatter):
        def format(self, record):
            if hasattr(record, 'operation'):
                record.msg = f"[{record.operation}] {record.msg}"
            return super().format(record)

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    loggers = [
        'repodeploy.init',
        'repodeploy.git_sync',
        'repodeploy.error_handler'
    ]

    formatter = StructuredFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, config.log_level))

        # MCP uses stdout for the protocol, so log to stderr only
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.propagate = False


def register_tools(server: FastMCP, server_config: Config, executor: Optional[CommandExecutor] = None) -> None:
    """Register MCP tools with the server instance."""

    @server.tool()
    def sync_repository_branch(remote_url: str, branch: str = "") -> dict:
        """
        Bring the local checkout of a repository up to date with a branch.

        Clones the repository under the configured destination root if it is
        not there yet, then fetches, checks out the branch and pulls.

        Args:
            remote_url: Remote repository URL or scp-like identifier (git@host:org/proj.git)
            branch: Branch to check out; the configured default branch when empty

        Returns:
            Dictionary describing the outcome, including the failing step's
            error_code when synchronization stopped early
        """
        branch = branch or server_config.default_branch
        try:
            handle = open_repository(remote_url, server_config, executor=executor)
        except CloneError as e:
            return e.to_response().to_dict()
        return sync_repository(handle, branch).to_dict()

    @server.tool()
    def repository_status(remote_url: str) -> dict:
        """
        Report where a repository is checked out and which revision it is on.

        Args:
            remote_url: Remote repository URL or scp-like identifier

        Returns:
            Dictionary with name, deployment_path, branch and commit_id
        """
        try:
            handle = open_repository(remote_url, server_config, executor=executor)
        except CloneError as e:
            return e.to_response().to_dict()
        return get_repository_status(handle)

    @server.tool()
    def repository_commits(remote_url: str) -> Union[List[str], dict]:
        """
        List short commit ids of the checked out branch, newest first.

        Args:
            remote_url: Remote repository URL or scp-like identifier

        Returns:
            List of short commit ids, or an error dictionary when the
            repository could not be cloned or its history read
        """
        try:
            handle = open_repository(remote_url, server_config, executor=executor)
            return handle.commits()
        except RepositoryError as e:
            return e.to_response().to_dict()

    @server.tool()
    def check_repository_divergence(remote_url: str, from_ref: str, to_ref: str) -> dict:
        """
        Check whether two references of a repository have diverged.

        A comparison git could not perform is reported as diverged together
        with an error_code.

        Args:
            remote_url: Remote repository URL or scp-like identifier
            from_ref: Base reference, e.g. "main"
            to_ref: Reference to compare, e.g. "origin/main"
        """
        try:
            handle = open_repository(remote_url, server_config, executor=executor)
        except CloneError as e:
            return e.to_response().to_dict()
        return check_divergence(handle, from_ref, to_ref)

    logging.getLogger('repodeploy.init').info("MCP tools registered successfully")


def initialize_server(server_config: Optional[Config] = None, executor: Optional[CommandExecutor] = None) -> FastMCP:
    """Initialize MCP server with stdio transport."""
    server_config = server_config or load_configuration()
    validation_issues = validate_configuration(server_config)

    setup_logging(server_config)
    init_logger = logging.getLogger('repodeploy.init')

    for issue in validation_issues:
        if issue.startswith("ERROR:"):
            init_logger.error(issue[7:])
        elif issue.startswith("WARNING:"):
            init_logger.warning(issue[9:])

    error_count = sum(1 for issue in validation_issues if issue.startswith("ERROR:"))
    if error_count > 0:
        raise RuntimeError(f"Server startup failed due to {error_count} configuration error(s)")

    init_logger.info(f"Repositories will be deployed under {server_config.destination_root}")

    server = FastMCP("repodeploy", log_level=server_config.log_level)
    register_tools(server, server_config, executor=executor)

    init_logger.info("repodeploy MCP server initialized successfully")
    return server


def main():
    """Main entry point for the repodeploy MCP server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )
    startup_logger = logging.getLogger('repodeploy.startup')

    if sys.version_info < (3, 10):
        startup_logger.error(f"Python 3.10+ required, found {sys.version_info.major}.{sys.version_info.minor}")
        sys.exit(1)

    try:
        server = initialize_server()
        startup_logger.info("Starting server with stdio transport")
        server.run(transport="stdio")
    except KeyboardInterrupt:
        startup_logger.info("Server stopped by user (Ctrl+C)")
    except (ValueError, RuntimeError) as e:
        startup_logger.critical(f"Server failed to start: {e}")
        sys.exit(1)

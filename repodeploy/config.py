"""Configuration management for repodeploy."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .platform import get_default_destination_root, get_git_executable, normalize_path, validate_git_availability

load_dotenv()  # Load .env file if it exists

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class Config:
    """Configuration for repository deployment with validation and defaults."""

    # Checkouts are placed at destination_root / <repository name>
    destination_root: Path = field(default_factory=get_default_destination_root)

    # Git
    git_executable: str = field(default_factory=get_git_executable)
    default_branch: str = "main"

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.destination_root = normalize_path(self.destination_root)

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}")

        if not self.git_executable:
            raise ValueError("git_executable must not be empty")

        if not self.default_branch or not self.default_branch.strip():
            raise ValueError("default_branch must not be empty")


def load_configuration() -> Config:
    """Load configuration from environment variables."""
    try:
        return Config(
            destination_root=Path(os.getenv("REPODEPLOY_DESTINATION_ROOT", str(get_default_destination_root()))),
            git_executable=os.getenv("REPODEPLOY_GIT_EXECUTABLE", get_git_executable()),
            default_branch=os.getenv("REPODEPLOY_DEFAULT_BRANCH", "main"),
            log_level=os.getenv("REPODEPLOY_LOG_LEVEL", "INFO")
        )
    except (ValueError, TypeError) as e:
        raise ValueError(f"Configuration error: {e}")


def validate_configuration(config: Config) -> List[str]:
    """Validate configuration and return any errors or warnings."""
    errors = []

    # Check destination root permissions
    try:
        config.destination_root.mkdir(parents=True, exist_ok=True)
        test_file = config.destination_root / ".test_write"
        test_file.write_text("test")
        test_file.unlink()
    except PermissionError:
        errors.append(f"ERROR: No write permission for destination root: {config.destination_root}")
    except OSError as e:
        errors.append(f"ERROR: Cannot access destination root {config.destination_root}: {e}")

    available, message = validate_git_availability(config.git_executable)
    if not available:
        errors.append(f"ERROR: {message}")

    return errors

"""
Application Configuration - Settings for the database utility layer.

This module provides configuration for pagination bounds, retry and batch
defaults, and logging. Values come from environment variables or a YAML
file (see ``config_loader``); the dataclass defaults match the behaviour
route handlers get when nothing is configured.
"""

import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .interfaces.exceptions import ConfigurationError

# Hard ceiling for page size; configuration may lower it but never raise it
MAX_PAGE_LIMIT = 100


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", e) from e


@dataclass
class PaginationConfig:
    """Pagination defaults."""

    default_page: int = 1
    default_limit: int = 10
    max_limit: int = MAX_PAGE_LIMIT

    @classmethod
    def from_env(cls) -> "PaginationConfig":
        """Create configuration from environment variables."""
        return cls(
            default_page=_env_int("DB_DEFAULT_PAGE", 1),
            default_limit=_env_int("DB_DEFAULT_LIMIT", 10),
            max_limit=_env_int("DB_MAX_LIMIT", MAX_PAGE_LIMIT),
        )

    def validate(self) -> None:
        if not 1 <= self.max_limit <= MAX_PAGE_LIMIT:
            raise ConfigurationError(f"max_limit must be between 1 and {MAX_PAGE_LIMIT}")
        if self.default_page < 1:
            raise ConfigurationError("default_page must be at least 1")
        if not 1 <= self.default_limit <= self.max_limit:
            raise ConfigurationError(f"default_limit must be between 1 and {self.max_limit}")


@dataclass
class RetrySettings:
    """Retry defaults for database calls. Delays are in milliseconds."""

    max_retries: int = 3
    initial_delay_ms: int = 100

    @classmethod
    def from_env(cls) -> "RetrySettings":
        """Create configuration from environment variables."""
        return cls(
            max_retries=_env_int("DB_RETRY_MAX_RETRIES", 3),
            initial_delay_ms=_env_int("DB_RETRY_INITIAL_DELAY_MS", 100),
        )

    def validate(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative")
        if self.initial_delay_ms < 0:
            raise ConfigurationError("initial_delay_ms must be non-negative")


@dataclass
class BatchConfig:
    """Batch executor defaults."""

    batch_size: int = 10

    @classmethod
    def from_env(cls) -> "BatchConfig":
        """Create configuration from environment variables."""
        return cls(batch_size=_env_int("DB_BATCH_SIZE", 10))

    def validate(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be at least 1")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format_type: str = "text"
    file: str | None = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        file_path = os.getenv("LOG_FILE")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format_type=os.getenv("LOG_FORMAT_TYPE", "text"),
            file=file_path if file_path else None,
        )

    def validate(self) -> None:
        if self.format_type not in ("text", "json"):
            raise ConfigurationError(f"Invalid log format type: {self.format_type}")
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Invalid log level: {self.level}")


@dataclass
class DatabaseUtilsConfig:
    """Main configuration for the database utility layer."""

    environment: Environment = Environment.DEVELOPMENT
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    retry: RetrySettings = field(default_factory=RetrySettings)
    batch: BatchConfig = field(default_factory=BatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """
        Validate every section.

        Raises:
            ConfigurationError: If any value is out of range
        """
        self.pagination.validate()
        self.retry.validate()
        self.batch.validate()
        self.logging.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        data = asdict(self)
        data["environment"] = self.environment.value
        return data

"""
Configuration Loader - Handles IO operations for configuration management.

This module is responsible for loading configuration from environment
variables (optionally seeded from a ``.env`` file) and YAML files while
keeping ``DatabaseUtilsConfig`` focused on data and validation.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .config import (
    BatchConfig,
    DatabaseUtilsConfig,
    Environment,
    LoggingConfig,
    PaginationConfig,
    RetrySettings,
)
from .interfaces.exceptions import ConfigurationError


class ConfigLoader:
    """Handles loading and saving of configuration from various sources."""

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> DatabaseUtilsConfig:
        """
        Create configuration from environment variables.

        Args:
            dotenv_path: Optional ``.env`` file loaded before reading the environment.
                Variables already set in the process take precedence.

        Returns:
            DatabaseUtilsConfig: Validated configuration
        """
        if dotenv_path is not None:
            load_dotenv(dotenv_path, override=False)

        env_str = os.getenv("ENVIRONMENT", "development")
        try:
            environment = Environment(env_str)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment: {env_str}", e) from e

        config = DatabaseUtilsConfig(
            environment=environment,
            pagination=PaginationConfig.from_env(),
            retry=RetrySettings.from_env(),
            batch=BatchConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> DatabaseUtilsConfig:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            DatabaseUtilsConfig: Validated configuration
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        config = DatabaseUtilsConfig()

        # Handle empty or null YAML files
        if not data:
            return config

        if "environment" in data:
            try:
                config.environment = Environment(data["environment"])
            except ValueError as e:
                raise ConfigurationError(f"Invalid environment: {data['environment']}", e) from e

        if "pagination" in data:
            page_data = data["pagination"] or {}
            config.pagination = PaginationConfig(
                default_page=page_data.get("default_page", config.pagination.default_page),
                default_limit=page_data.get("default_limit", config.pagination.default_limit),
                max_limit=page_data.get("max_limit", config.pagination.max_limit),
            )

        if "retry" in data:
            retry_data = data["retry"] or {}
            config.retry = RetrySettings(
                max_retries=retry_data.get("max_retries", config.retry.max_retries),
                initial_delay_ms=retry_data.get("initial_delay_ms", config.retry.initial_delay_ms),
            )

        if "batch" in data:
            batch_data = data["batch"] or {}
            config.batch = BatchConfig(
                batch_size=batch_data.get("batch_size", config.batch.batch_size)
            )

        if "logging" in data:
            log_data = data["logging"] or {}
            config.logging = LoggingConfig(
                level=log_data.get("level", config.logging.level),
                format_type=log_data.get("format_type", config.logging.format_type),
                file=log_data.get("file", config.logging.file),
            )

        config.validate()
        return config

    @classmethod
    def to_yaml(cls, config: DatabaseUtilsConfig) -> str:
        """
        Convert configuration to YAML string.

        Args:
            config: DatabaseUtilsConfig instance to convert

        Returns:
            str: YAML representation of the configuration
        """
        return yaml.dump(config.to_dict(), default_flow_style=False)

"""Configuration models for retrykit.

Pydantic models for retry behaviour and logging, loadable from YAML::

    retry:
      max_retries: 5
      initial_delay_ms: 500
      max_delay_ms: 10000
      backoff_multiplier: 2
    logging:
      level: DEBUG
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from retrykit.core.errors.exceptions import ConfigError


class RetryConfig(BaseModel):
    """Configuration for bounded exponential-backoff retries."""

    max_retries: int = Field(
        default=3, ge=0, description="Maximum retries after the first attempt"
    )
    initial_delay_ms: int = Field(
        default=1000, gt=0, description="Delay before the first retry (ms)"
    )
    max_delay_ms: int = Field(default=30000, gt=0, description="Delay cap (ms)")
    backoff_multiplier: float = Field(
        default=2.0, gt=1, description="Geometric growth factor between retries"
    )

    @model_validator(mode="after")
    def _validate_delay_range(self) -> RetryConfig:
        if self.initial_delay_ms > self.max_delay_ms:
            raise ValueError(
                f"initial_delay_ms ({self.initial_delay_ms}) must not exceed "
                f"max_delay_ms ({self.max_delay_ms})"
            )
        return self


class LogConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console", "both"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable, "
        "both for console to stderr and JSON to file",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path for log file output (required if format='both')",
    )
    max_file_size_mb: int = Field(default=50, gt=0, le=1000)
    backup_count: int = Field(default=5, ge=0, le=100)

    @model_validator(mode="after")
    def _validate_file_path(self) -> LogConfig:
        if self.format == "both" and self.file_path is None:
            raise ValueError("file_path is required when format='both'")
        return self


class RecoveryConfig(BaseModel):
    """Top-level retrykit configuration."""

    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> RecoveryConfig:
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If the file is missing, unparseable or invalid.
        """
        try:
            with open(path) as f:
                text = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        return cls.from_yaml_string(text, source=str(path))

    @classmethod
    def from_yaml_string(cls, yaml_str: str, *, source: str = "<string>") -> RecoveryConfig:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {source}: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config root in {source} must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e


__all__ = ["LogConfig", "RecoveryConfig", "RetryConfig"]

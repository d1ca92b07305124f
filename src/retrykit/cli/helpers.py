"""Shared state and loaders for retrykit CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from retrykit.core.config import LogConfig, RecoveryConfig, RetryConfig
from retrykit.core.errors import ConfigError
from retrykit.core.logging import LogFormat, LogLevel, configure_logging

# -----------------------------------------------------------------------------
# Logging set up by the global options
# -----------------------------------------------------------------------------


@dataclass
class CliLoggingConfig:
    """Values collected from ``--log-level``/``--log-format``.

    Option callbacks run before the app callback, so they only record the
    values; ``configure_global_logging`` applies them once per process.
    """

    level: LogLevel = "WARNING"
    format: LogFormat = "console"
    configured: bool = False
    # Set when given on the command line; these win over a config file
    level_explicit: bool = False
    format_explicit: bool = False


_log_config = CliLoggingConfig()


def set_log_level(level: str) -> None:
    _log_config.level = level.upper()  # type: ignore[assignment]
    _log_config.level_explicit = True


def set_log_format(fmt: str) -> None:
    _log_config.format = fmt.lower()  # type: ignore[assignment]
    _log_config.format_explicit = True


def configure_global_logging(console: Console) -> None:
    """Apply the collected logging options.

    Raises:
        typer.Exit: With code 1 when the options are not usable.
    """
    if _log_config.configured:
        return
    try:
        configure_logging(level=_log_config.level, format=_log_config.format)
    except (ValueError, AttributeError) as e:
        console.print(f"[red]Cannot configure logging:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    _log_config.configured = True


def reset_logging_state() -> None:
    """Forget collected options; used between CLI invocations in tests."""
    global _log_config
    _log_config = CliLoggingConfig()


def apply_config_logging(console: Console, config: LogConfig) -> None:
    """Reconfigure logging from a config file's ``logging`` section.

    ``--log-level`` and ``--log-format`` given on the command line keep
    precedence over the file.

    Raises:
        typer.Exit: With code 1 when the merged settings are not usable.
    """
    settings = config.model_dump()
    if _log_config.level_explicit:
        settings["level"] = _log_config.level
    if _log_config.format_explicit:
        settings["format"] = _log_config.format
    try:
        configure_logging(**settings)
    except (ValueError, OSError) as e:
        console.print(f"[red]Cannot configure logging:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    _log_config.configured = True


# -----------------------------------------------------------------------------
# Retry configuration
# -----------------------------------------------------------------------------


def load_retry_config(
    console: Console,
    config_file: Path | None,
    **overrides: float | int | None,
) -> RetryConfig:
    """Build a RetryConfig from an optional YAML file and CLI overrides.

    Overrides left as ``None`` keep the file's (or the default) value. A
    ``logging`` section in the file is applied through
    ``apply_config_logging``.

    Raises:
        typer.Exit: With code 1 when the file or the merged values are invalid.
    """
    try:
        loaded = RecoveryConfig.from_yaml(config_file) if config_file else RecoveryConfig()
    except ConfigError as e:
        console.print(f"[red]Error loading config:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    if "logging" in loaded.model_fields_set:
        apply_config_logging(console, loaded.logging)
    base = loaded.retry

    merged = {**base.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
    try:
        return RetryConfig.model_validate(merged)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        console.print(f"[red]Invalid retry settings:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

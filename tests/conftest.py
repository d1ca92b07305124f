"""Pytest fixtures for retrykit tests."""

import logging
from collections.abc import Generator

import pytest
import structlog

from retrykit.connectivity import ManualConnectivitySource, reset_connectivity_monitor
from tests.helpers import ResponseError


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset logging state before and after each test.

    This ensures test isolation for logging configuration.
    """
    import retrykit.cli.helpers as cli_helpers

    cli_helpers.reset_logging_state()
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    cli_helpers.reset_logging_state()
    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture(autouse=True)
def reset_default_monitor() -> Generator[None, None, None]:
    """Forget the process-wide connectivity monitor between tests."""
    reset_connectivity_monitor()
    yield
    reset_connectivity_monitor()


@pytest.fixture
def source() -> ManualConnectivitySource:
    """An online connectivity source driven by the test."""
    return ManualConnectivitySource(online=True)


@pytest.fixture
def server_error() -> ResponseError:
    """A retryable error shaped like an HTTP client error."""
    return ResponseError(500)


@pytest.fixture
def auth_error() -> ResponseError:
    """A non-retryable error."""
    return ResponseError(401)

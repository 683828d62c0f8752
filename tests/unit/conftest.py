"""Shared fixtures for unit tests."""

from unittest.mock import Mock

import pytest


@pytest.fixture
def mock_lock():
    """Create a mock lock adapter."""
    lock = Mock()
    lock.acquire = Mock(return_value=True)
    lock.release = Mock(return_value=True)
    return lock


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.debug = Mock()
    return logger

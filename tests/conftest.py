"""Pytest fixtures for all tests."""

import logging
import os
import sys

import pytest

# Add the src directory to the path so we can import preference_store
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from preference_store.common.log import setup_log  # pylint: disable=wrong-import-position
from preference_store.media.medium_memory import MediumMemory  # pylint: disable=wrong-import-position
from preference_store.storage.preference_store import PreferenceStore  # pylint: disable=wrong-import-position


@pytest.fixture(scope="session", autouse=True)
def setup_logging(tmp_path_factory):
    """Set up logging once for the whole test session."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    setup_log(
        logFilePath=str(tmp_path_factory.mktemp("logs") / "test_logs.log"),
        stdOutLogLevel="INFO",
        fileLogLevel="DEBUG",
        logFormat="pipe-delimited",
        logBack={},
    )

    yield

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture
def isolated_logging():
    """
    Save the root logger state before a test and restore it afterwards, so
    tests that reconfigure logging do not leak into other tests.
    """
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    yield root_logger

    for handler in root_logger.handlers[:]:
        if handler not in original_handlers:
            handler.close()
    root_logger.handlers.clear()
    root_logger.handlers.extend(original_handlers)
    root_logger.setLevel(original_level)


@pytest.fixture
def memory_store():
    """A preference store over a fresh in-memory medium."""
    store = PreferenceStore(lambda: MediumMemory({}))
    yield store
    store.close()

"""Pytest configuration and fixtures for ghbin tests."""

import logging
import os
import tempfile

import pytest

# Must run before any ghbin module creates its logger
os.environ.setdefault(
    "GHBIN_LOG_DIR", tempfile.mkdtemp(prefix="ghbin-test-logs-")
)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("ghbin"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value

"""Pytest configuration and fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    """Capture stockfeed logs at DEBUG so debug-only log paths are exercised."""
    caplog.set_level(logging.DEBUG, logger="stockfeed")
    yield

"""Integration fixtures."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop the handler the CLI installs so later tests see plain logging."""
    yield
    logger = logging.getLogger("pcfingerprinter")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)

"""CLI-specific fixtures: a runner and an injected context object."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from pcfingerprinter.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop the handler the CLI installs so later tests see plain logging."""
    yield
    logger = logging.getLogger("pcfingerprinter")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def cli_obj(config, static_source) -> dict:
    """Context object wiring the CLI to temp paths and static hardware."""
    return {"config": config, "hardware_source": static_source, "environ": {}}


@pytest.fixture
def created(runner: CliRunner, cli_obj: dict, key_files, config) -> Path:
    """Run ``create`` once and return the written fingerprint path."""
    result = runner.invoke(
        cli,
        [
            "create",
            "--buyer", "Jane Doe",
            "--purchase", "2025-09-18",
            "--privKey", str(key_files[0]),
        ],
        obj=cli_obj,
    )
    assert result.exit_code == 0, result.output
    return config.fingerprint_path

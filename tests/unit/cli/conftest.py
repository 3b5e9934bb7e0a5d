"""Fixtures for CLI tests."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from clipchain.config.models import ClipchainConfig


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from reconfiguring the root logger."""
    with patch("clipchain.cli.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_obj() -> dict:
    """Context object with a default configuration."""
    return {"config": ClipchainConfig()}

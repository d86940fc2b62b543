"""Unit tests for the logging configuration."""

import logging
from unittest.mock import patch

import pytest

from git_branch_mirror.utils.logging_config import configure_logging


@pytest.mark.parametrize("debug,level", [pytest.param(False, logging.INFO, id="info"), pytest.param(True, logging.DEBUG, id="debug")])
def test_configure_logging_sets_level(debug: bool, level: int) -> None:
    """Test that the debug flag selects the log level and structlog renders to the console."""
    with (
        patch("git_branch_mirror.utils.logging_config.logging.basicConfig") as mock_basic_config,
        patch("git_branch_mirror.utils.logging_config.structlog.configure") as mock_configure,
    ):
        configure_logging(debug)

    assert mock_basic_config.call_args.kwargs["level"] == level
    assert mock_basic_config.call_args.kwargs["force"] is True
    processors = mock_configure.call_args.kwargs["processors"]
    assert type(processors[-1]).__name__ == "ConsoleRenderer"

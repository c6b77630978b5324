"""Tests for logging setup"""
import logging
from unittest.mock import patch

import pytest

from git_worktree_keeper.logging_config import (
    GITPYTHON_LOGGERS,
    ColoredFormatter,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging(temp_dir):
    """Keep the root logger and GitPython levels as they were."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    levels = {name: logging.getLogger(name).level for name in GITPYTHON_LOGGERS}
    with patch("git_worktree_keeper.logging_config.get_log_file", return_value=temp_dir / "wt.log"):
        yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    for name, old in levels.items():
        logging.getLogger(name).setLevel(old)


class TestSetupLogging:
    """Test levels and handlers."""

    def test_runner_logs_commands_in_debug(self):
        """Test the git runner's logger emits DEBUG lines with --debug."""
        setup_logging(debug=True)
        runner_logger = get_logger("git_worktree_keeper.services.git.runner")
        assert runner_logger.name == "git.runner"
        assert runner_logger.isEnabledFor(logging.DEBUG)

    def test_gitpython_is_capped(self):
        """Test GitPython's process logging stays quiet in debug mode."""
        setup_logging(debug=True)
        assert not logging.getLogger("git.cmd").isEnabledFor(logging.DEBUG)

    @pytest.mark.parametrize(
        "verbose,debug,level",
        [(False, False, logging.WARNING), (True, False, logging.INFO), (False, True, logging.DEBUG)],
    )
    def test_levels(self, verbose, debug, level):
        """Test the flag to level mapping."""
        setup_logging(verbose=verbose, debug=debug)
        assert logging.getLogger().level == level

    def test_debug_writes_log_file(self, temp_dir):
        """Test debug mode mirrors records to the log file."""
        setup_logging(debug=True)
        get_logger("git_worktree_keeper.core.worktree_keeper").debug("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello file" in (temp_dir / "wt.log").read_text()


class TestGetLogger:
    """Test logger naming."""

    def test_prefixes_stripped(self):
        """Test package and services prefixes are dropped."""
        assert get_logger("git_worktree_keeper.core.bootstrap").name == "core.bootstrap"
        assert get_logger("git_worktree_keeper.services.hook_service").name == "hook_service"


class TestColoredFormatter:
    """Test level coloring."""

    def test_color_does_not_leak(self):
        """Test coloring leaves the original record untouched."""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        text = ColoredFormatter(fmt="%(levelname)s %(message)s", use_color=True).format(record)
        assert "\033[33m" in text
        assert record.levelname == "WARNING"

    def test_plain_without_terminal(self):
        """Test no escape codes when color is off."""
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "msg", None, None)
        assert ColoredFormatter(fmt="%(levelname)s", use_color=False).format(record) == "ERROR"

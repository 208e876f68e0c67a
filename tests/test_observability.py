"""
Tests for observability — log level resolution and handler setup.
"""

import logging

import pytest

from oneclick.core.observability.logging_config import (
    ENV_LOG_LEVEL,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_default_is_warning(self):
        assert resolve_level(env={}) == "WARNING"

    def test_env_var(self):
        assert resolve_level(env={ENV_LOG_LEVEL: "INFO"}) == "INFO"

    def test_flags_beat_env(self):
        env = {ENV_LOG_LEVEL: "CRITICAL"}
        assert resolve_level(quiet=True, env=env) == "ERROR"
        assert resolve_level(verbose=True, env=env) == "INFO"

    def test_debug_wins(self):
        assert resolve_level(verbose=True, quiet=True, debug=True, env={}) == "DEBUG"

    def test_verbose_beats_quiet(self):
        assert resolve_level(verbose=True, quiet=True, env={}) == "INFO"


class TestSetupLogging:
    def test_console_handler(self, restore_root_logger):
        setup_logging("INFO")
        root = restore_root_logger
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_unknown_level_falls_back(self, restore_root_logger):
        setup_logging("LOUD")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "oneclick.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

        logging.getLogger("oneclick.test").debug("written to file only")
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text()

    def test_third_party_quieted(self, restore_root_logger):
        logging.getLogger("urllib3").setLevel(logging.DEBUG)
        setup_logging("INFO")
        assert logging.getLogger("urllib3").level == logging.WARNING

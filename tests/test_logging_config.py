"""Tests for logging setup."""

import logging

from git_worktree_keeper.logging_config import get_logger, setup_logging


class TestLogging:
    def test_logger_names_are_shortened(self):
        assert get_logger("git_worktree_keeper.services.cache_service").name == "cache_service"
        assert get_logger("git_worktree_keeper.config").name == "config"

    def test_levels(self, temp_dir):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging()
            assert root.level == logging.WARNING

            setup_logging(verbose=True)
            assert root.level == logging.INFO

            log_file = temp_dir / "logs" / "debug.log"
            setup_logging(debug=True, log_file=log_file)
            assert root.level == logging.DEBUG
            get_logger("git_worktree_keeper.test").debug("hello from test")
            for handler in root.handlers:
                handler.flush()
            assert "hello from test" in log_file.read_text()
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

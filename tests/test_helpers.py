"""
Tests for Utility Helpers and Logging

Unit tests for the helper functions and the package logger setup.
"""

import logging
import os
from unittest.mock import MagicMock, patch

import pytest

from postlint.utils.helpers import (
    is_valid_url, retry, truncate_text, split_post_filename, ensure_dir_exists
)
from postlint.utils.logger import get_logger, setup_file_logging, LOGGER_NAMESPACE


class TestHelpers:
    """Tests for helpers module functions."""

    @pytest.mark.parametrize("url,expected", [
        ("https://docs.aws.amazon.com/textract/", True),
        ("http://example.com", True),
        ("ftp://example.com/file", False),
        ("https://", False),
        ("not a url", False),
    ])
    def test_is_valid_url(self, url, expected):
        assert is_valid_url(url) is expected

    def test_retry_succeeds_after_failures(self):
        func = MagicMock(side_effect=[ValueError("1"), ValueError("2"), "done"])

        with patch('postlint.utils.helpers.time.sleep') as mock_sleep:
            assert retry(func, max_attempts=3, delay=1, exceptions=(ValueError,)) == "done"

        assert func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    def test_retry_raises_last_error(self):
        func = MagicMock(side_effect=ValueError("always"))

        with patch('postlint.utils.helpers.time.sleep'):
            with pytest.raises(ValueError, match="always"):
                retry(func, max_attempts=2, delay=0, exceptions=(ValueError,))

    def test_retry_ignores_other_exceptions(self):
        func = MagicMock(side_effect=KeyError("k"))

        with pytest.raises(KeyError):
            retry(func, max_attempts=3, exceptions=(ValueError,))
        assert func.call_count == 1

    def test_truncate_text(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a long sentence here", 6) == "a long..."
        assert truncate_text("a long sentence here", 6, add_ellipsis=False) == "a long"

    @pytest.mark.parametrize("path,expected", [
        ("_posts/2023-08-14-conflict-exception.md", ("2023-08-14", "conflict-exception")),
        ("2024-01-02-x.markdown", ("2024-01-02", "x")),
        ("_posts/notes.md", (None, "notes")),
    ])
    def test_split_post_filename(self, path, expected):
        assert split_post_filename(path) == expected

    def test_ensure_dir_exists(self, tmp_path):
        target = tmp_path / "a" / "b"

        ensure_dir_exists(str(target))
        ensure_dir_exists(str(target))

        assert target.is_dir()


class TestLogger:
    """Tests for get_logger and setup_file_logging."""

    def test_loggers_share_namespace(self):
        assert get_logger("postlint.services.lint_service").name == "postlint.services.lint_service"
        assert get_logger("scripts").name == "postlint.scripts"
        assert get_logger(LOGGER_NAMESPACE).name == LOGGER_NAMESPACE

    def test_console_handler_added_once(self):
        get_logger("postlint.a")
        get_logger("postlint.b")

        root = logging.getLogger(LOGGER_NAMESPACE)
        consoles = [h for h in root.handlers if getattr(h, "_postlint_console", False)]
        assert len(consoles) == 1

    @pytest.fixture
    def own_file_handlers(self):
        """Yield a lookup of handlers writing to given paths, removing them afterwards."""
        root = logging.getLogger(LOGGER_NAMESPACE)
        original_level = root.level
        opened = []

        def _handlers_for(*paths):
            wanted = {os.path.abspath(p) for p in paths}
            found = [h for h in root.handlers
                     if isinstance(h, logging.FileHandler) and h.baseFilename in wanted]
            opened.extend(h for h in found if h not in opened)
            return found

        yield _handlers_for

        for handler in opened:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(original_level)

    def test_setup_file_logging(self, tmp_path, own_file_handlers):
        log_file = str(tmp_path / "postlint.log")

        setup_file_logging(log_file, logging.DEBUG)
        setup_file_logging(log_file, logging.DEBUG)
        get_logger("postlint.test").info("written to file")

        handlers = own_file_handlers(log_file)
        assert len(handlers) == 1
        handlers[0].flush()
        with open(log_file, encoding="utf-8") as f:
            assert "written to file" in f.read()

    def test_same_file_name_in_other_directory_gets_own_handler(self, tmp_path, own_file_handlers):
        first = str(tmp_path / "a" / "run.log")
        second = str(tmp_path / "b" / "run.log")
        os.makedirs(os.path.dirname(first))
        os.makedirs(os.path.dirname(second))

        setup_file_logging(first, logging.INFO)
        setup_file_logging(second, logging.INFO)

        assert len(own_file_handlers(first, second)) == 2

    def test_unwritable_log_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            setup_file_logging(str(tmp_path / "missing" / "x.log"), logging.INFO)

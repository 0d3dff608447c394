"""Tests for settings and logging setup."""

import logging
from unittest.mock import patch

import pytest

from moderation.core.config import Settings
from moderation.core.logger import configure_from_settings, setup_logger


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("sqlite")
        assert settings.auto_approve_note == "Auto-approved (admin/moderator edit)"
        assert settings.notification_link_base is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://directory@localhost/directory")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql://directory@localhost/directory"
        assert settings.log_level == "DEBUG"

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="https://a.example, https://b.example,")

        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]


class TestSetupLogger:

    def test_console_logger(self):
        logger = setup_logger("moderation.test_console", level="DEBUG")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_no_duplicate_handlers(self):
        setup_logger("moderation.test_dupes")
        logger = setup_logger("moderation.test_dupes", level="WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_file_logging(self, tmp_path):
        logger = setup_logger("moderation.test_file", log_dir=str(tmp_path))
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert "hello" in (tmp_path / "moderation.test_file.log").read_text()

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger("moderation.test_invalid", level="LOUD")

    def test_configure_from_settings(self, tmp_path):
        settings = Settings(_env_file=None, log_level="ERROR", log_dir=str(tmp_path), log_to_file=False)

        with patch("moderation.core.logger.setup_logger") as setup:
            configure_from_settings(settings)

        setup.assert_called_once_with("moderation", level="ERROR", log_dir=None)

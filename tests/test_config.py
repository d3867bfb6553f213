"""Tests for mdview.config."""

from __future__ import annotations

import logging

import pytest

from mdview.config import Config


class TestConfigDefaults:
    def test_defaults(self) -> None:
        config = Config()
        assert config.width is None
        assert config.code_theme == "monokai"
        assert config.watch is True
        assert config.log_level == "warning"
        assert config.scroll_step == 1


class TestConfigFromEnv:
    def test_empty_environment(self) -> None:
        assert Config.from_env({}) == Config()

    def test_reads_variables(self) -> None:
        config = Config.from_env(
            {"MDVIEW_WIDTH": "100", "MDVIEW_CODE_THEME": "friendly", "MDVIEW_LOG_LEVEL": "DEBUG"}
        )
        assert config.width == 100
        assert config.code_theme == "friendly"
        assert config.log_level == "debug"

    def test_invalid_width_ignored_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="mdview.config"):
            config = Config.from_env({"MDVIEW_WIDTH": "wide"})
        assert config.width is None
        assert "MDVIEW_WIDTH" in caplog.text

    def test_non_positive_width_ignored(self) -> None:
        assert Config.from_env({"MDVIEW_WIDTH": "0"}).width is None

    def test_unknown_log_level_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="mdview.config"):
            config = Config.from_env({"MDVIEW_LOG_LEVEL": "loud"})
        assert config.log_level == "warning"
        assert "MDVIEW_LOG_LEVEL" in caplog.text

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MDVIEW_WIDTH", "42")
        assert Config.from_env().width == 42

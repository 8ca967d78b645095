"""Tests for logging setup and settings-change logging."""

import logging

import pytest

from src.log import SETTINGS_STATE_KEY, log_settings_change, setup_logging
from src.models.settings import IndicatorSettings


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


class TestSetupLogging:
    def test_sets_root_level_even_when_handlers_exist(self, restore_root_level):
        restore_root_level.setLevel(logging.WARNING)
        setup_logging("info")
        assert restore_root_level.level == logging.INFO

    def test_unknown_level_falls_back_to_info(self, restore_root_level):
        setup_logging("chatty")
        assert restore_root_level.level == logging.INFO


class TestLogSettingsChange:
    def test_change_is_logged_at_info_after_setup(self, restore_root_level, caplog):
        restore_root_level.setLevel(logging.WARNING)
        setup_logging("INFO")
        state = {}
        new = IndicatorSettings(length=14)

        assert log_settings_change(state, new, logging.getLogger("dashboard")) is True

        messages = [r.getMessage() for r in caplog.records if r.name == "dashboard"]
        assert len(messages) == 1
        assert messages[0].startswith("Indicator settings changed:")
        assert '"length":14' in messages[0]
        assert caplog.records[-1].levelno == logging.INFO
        assert state[SETTINGS_STATE_KEY] == new

    def test_unchanged_settings_not_logged(self, restore_root_level, caplog):
        setup_logging("INFO")
        state = {SETTINGS_STATE_KEY: IndicatorSettings(length=14)}

        assert log_settings_change(state, IndicatorSettings(length=14), logging.getLogger("dashboard")) is False
        assert not [r for r in caplog.records if r.name == "dashboard"]

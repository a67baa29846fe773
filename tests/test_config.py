"""Tests for configuration and initialization."""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import patch

import pytest

from monadkit import Config, get_config, init
from monadkit._config import _detect_log_level, _env_flag, reset_config
from monadkit._logging import add_log_hook


class TestConfig:
    """Tests for the Config dataclass."""

    def test_default_values(self) -> None:
        config = Config()
        assert config.log_level is None
        assert config.json_logs is True
        assert config.trace_conversions is False

    def test_config_is_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.trace_conversions = True  # type: ignore[misc]


class TestEnvDetection:
    """Tests for environment variable parsing."""

    @pytest.mark.parametrize('raw', ['1', 'true', 'YES', ' on '])
    def test_truthy_flags(self, raw: str) -> None:
        with patch.dict(os.environ, {'MONADKIT_TRACE_CONVERSIONS': raw}):
            assert _env_flag('MONADKIT_TRACE_CONVERSIONS', False) is True

    @pytest.mark.parametrize('raw', ['0', 'false', 'No', ''])
    def test_falsy_flags(self, raw: str) -> None:
        with patch.dict(os.environ, {'MONADKIT_JSON_LOGS': raw}):
            assert _env_flag('MONADKIT_JSON_LOGS', True) is False

    def test_unknown_flag_uses_default(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_JSON_LOGS': 'maybe'}):
            assert _env_flag('MONADKIT_JSON_LOGS', True) is True

    def test_missing_flag_uses_default(self) -> None:
        assert _env_flag('MONADKIT_TRACE_CONVERSIONS', False) is False

    def test_log_level_case_insensitive(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_LOG_LEVEL': 'debug'}):
            assert _detect_log_level() == 'DEBUG'

    def test_unknown_log_level_ignored(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_LOG_LEVEL': 'LOUD'}):
            assert _detect_log_level() is None


class TestGetConfig:
    """Tests for lazy resolution."""

    def test_defaults_without_init(self) -> None:
        assert get_config() == Config()

    def test_resolved_from_environment(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_TRACE_CONVERSIONS': 'true', 'MONADKIT_JSON_LOGS': 'false'}):
            reset_config()
            config = get_config()
        assert config.trace_conversions is True
        assert config.json_logs is False

    def test_cached_until_reset(self) -> None:
        first = get_config()
        with patch.dict(os.environ, {'MONADKIT_TRACE_CONVERSIONS': 'true'}):
            assert get_config() is first
            reset_config()
            assert get_config().trace_conversions is True


class TestInit:
    """Tests for init()."""

    def test_explicit_arguments(self) -> None:
        config = init(trace_conversions=True, json_logs=False)
        assert config == Config(log_level=None, json_logs=False, trace_conversions=True)
        assert get_config() is config

    def test_arguments_override_environment(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_TRACE_CONVERSIONS': 'true'}):
            assert init(trace_conversions=False).trace_conversions is False

    def test_unset_arguments_fall_back_to_environment(self) -> None:
        with patch.dict(os.environ, {'MONADKIT_TRACE_CONVERSIONS': 'yes'}):
            assert init().trace_conversions is True

    def test_log_level_configures_logging(self, restore_logging: None) -> None:
        events: list[dict[str, Any]] = []
        add_log_hook(events.append)

        config = init(log_level='debug', json_logs=False)

        assert config.log_level == 'DEBUG'
        configured = [e for e in events if e.get('event') == 'monadkit_configured']
        assert len(configured) == 1
        assert configured[0]['log_level'] == 'DEBUG'
        assert configured[0]['json_logs'] is False

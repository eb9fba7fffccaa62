"""Tests for detection config."""

import pytest

from browsing_insights.config import DetectionConfig
from browsing_insights.exceptions import ConfigError


def test_defaults():
    config = DetectionConfig()
    assert config.hoarder_threshold == 60
    assert config.high_confidence_threshold == 80
    assert config.low_confidence_threshold == 40
    assert config.routine_threshold == 70
    assert config.lookback_days == 30
    assert config.session_min_tabs == 3


def test_from_env_overrides():
    config = DetectionConfig.from_env({
        "BROWSING_INSIGHTS_HOARDER_THRESHOLD": "65",
        "BROWSING_INSIGHTS_SESSION_TIME_WINDOW_MINUTES": "20.5",
        "UNRELATED": "x",
    })
    assert config.hoarder_threshold == 65
    assert isinstance(config.hoarder_threshold, int)
    assert config.session_time_window_minutes == 20.5
    assert config.routine_threshold == 70


def test_from_env_ignores_blank():
    config = DetectionConfig.from_env({"BROWSING_INSIGHTS_LOOKBACK_DAYS": "  "})
    assert config.lookback_days == 30


def test_from_env_invalid_value():
    with pytest.raises(ConfigError, match="BROWSING_INSIGHTS_ROUTINE_THRESHOLD"):
        DetectionConfig.from_env({"BROWSING_INSIGHTS_ROUTINE_THRESHOLD": "high"})


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("BROWSING_INSIGHTS_WHITELIST_TOP_DOMAINS", "5")
    assert DetectionConfig.from_env().whitelist_top_domains == 5

"""
Tests for centralized configuration module.
"""

from __future__ import annotations

import logging
import os
from unittest import mock

import pytest
from pydantic import ValidationError

from roam.core.config import (
    RoamSettings,
    get_settings,
    reset_settings,
)


class TestRoamSettings:
    """Test RoamSettings class."""

    def test_default_values(self):
        """Test that default values are correct."""
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = RoamSettings()

            assert settings.log_level == "WARNING"
            assert settings.debug is False
            assert settings.log_json is False
            assert settings.graphhopper_api_key is None
            assert settings.oracle_base_url == "https://graphhopper.com/api/1"
            assert settings.oracle_profile == "bike"
            assert settings.oracle_timeout == 30.0

    def test_tunable_defaults(self):
        """Loop generation tunables default to the documented values."""
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = RoamSettings()

            assert settings.stretch_factor == 1.3
            assert settings.distance_tolerance == 0.2
            assert settings.max_retries == 3
            assert settings.max_unroutable_retries == 7
            assert settings.max_waypoints == 3
            assert settings.star_trim_fraction == 0.10
            assert settings.star_threshold_fraction == 0.25
            assert settings.star_rotation_deg == 30.0
            assert settings.unroutable_rotation_deg == 45.0
            assert settings.unroutable_radius_shrink == 0.95

    def test_log_level_from_env(self):
        """Test log level parsing from environment."""
        with mock.patch.dict(os.environ, {"ROAM_LOG_LEVEL": "DEBUG"}, clear=True):
            settings = RoamSettings()
            assert settings.log_level == "DEBUG"
            assert settings.effective_log_level == "DEBUG"

    def test_log_level_case_insensitive(self):
        """Test log level is case-insensitive."""
        with mock.patch.dict(os.environ, {"ROAM_LOG_LEVEL": "info"}, clear=True):
            settings = RoamSettings()
            assert settings.log_level == "INFO"

    def test_invalid_log_level_rejected(self):
        with mock.patch.dict(os.environ, {"ROAM_LOG_LEVEL": "CHATTY"}, clear=True):
            with pytest.raises(ValidationError):
                RoamSettings()

    def test_debug_flag_enables_debug_level(self):
        """ROAM_DEBUG enables DEBUG when the level was left at its default."""
        with mock.patch.dict(os.environ, {"ROAM_DEBUG": "1"}, clear=True):
            settings = RoamSettings()
            assert settings.effective_log_level == "DEBUG"
            assert settings.log_level_int == logging.DEBUG

    def test_explicit_level_beats_debug_flag(self):
        env = {"ROAM_DEBUG": "1", "ROAM_LOG_LEVEL": "ERROR"}
        with mock.patch.dict(os.environ, env, clear=True):
            settings = RoamSettings()
            assert settings.effective_log_level == "ERROR"

    def test_api_key_has_no_prefix(self):
        """GRAPHHOPPER_API_KEY is read without the ROAM_ prefix."""
        with mock.patch.dict(os.environ, {"GRAPHHOPPER_API_KEY": "gh-key"}, clear=True):
            settings = RoamSettings()
            assert settings.graphhopper_api_key == "gh-key"

    def test_tunables_from_env(self):
        env = {"ROAM_MAX_RETRIES": "5", "ROAM_DISTANCE_TOLERANCE": "0.1"}
        with mock.patch.dict(os.environ, env, clear=True):
            settings = RoamSettings()
            assert settings.max_retries == 5
            assert settings.distance_tolerance == 0.1

    def test_invalid_shrink_rejected(self):
        with mock.patch.dict(os.environ, {"ROAM_UNROUTABLE_RADIUS_SHRINK": "1.5"}, clear=True):
            with pytest.raises(ValidationError):
                RoamSettings()


class TestSettingsSingleton:
    """Test get_settings caching."""

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_reloads_environment(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("ROAM_ORACLE_PROFILE", "racingbike")
        assert get_settings() is first

        reset_settings()
        assert get_settings().oracle_profile == "racingbike"

"""
Roam Centralized Configuration

Provides validated, type-safe access to all environment variables using Pydantic Settings.

Usage:
    from roam.core.config import get_settings

    settings = get_settings()
    if settings.log_level == "DEBUG":
        ...

Environment Variables:
    ROAM_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ROAM_DEBUG: Debug flag (enables DEBUG level if set)
    ROAM_LOG_JSON: Output logs as JSON
    ROAM_ORACLE_BASE_URL: Routing oracle base URL
    ROAM_ORACLE_PROFILE: Routing profile (default: bike)
    ROAM_ORACLE_TIMEOUT: Oracle request timeout in seconds
    ROAM_STRETCH_FACTOR, ROAM_DISTANCE_TOLERANCE, ROAM_MAX_RETRIES, ...:
        Loop generation tunables (see core/constants.py)

External API Keys (no ROAM_ prefix):
    GRAPHHOPPER_API_KEY: GraphHopper routing API key
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import constants


def _find_project_env_file() -> Path | None:
    """
    Find .env file by searching for project root markers.

    Searches upward from this file's location for pyproject.toml,
    then checks for .env in that directory.
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            env_file = current / ".env"
            if env_file.exists():
                return env_file
            return None
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


_ENV_FILE = _find_project_env_file()


class RoamSettings(BaseSettings):
    """
    Roam configuration settings with validation.

    Environment variables are automatically loaded with the ROAM_ prefix.
    All settings have sensible defaults and validation.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROAM_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for Roam components",
    )

    debug: bool = Field(
        default=False,
        description="Debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    # =========================================================================
    # Routing Oracle
    # =========================================================================

    graphhopper_api_key: Optional[str] = Field(
        default=None,
        validation_alias="GRAPHHOPPER_API_KEY",
        description="GraphHopper routing API key",
    )

    oracle_base_url: str = Field(
        default=constants.GRAPHHOPPER_BASE_URL,
        description="Routing oracle base URL",
    )

    oracle_profile: str = Field(
        default=constants.DEFAULT_PROFILE,
        description="Routing profile requested from the oracle",
    )

    oracle_timeout: float = Field(
        default=constants.DEFAULT_ORACLE_TIMEOUT,
        gt=0,
        description="Oracle request timeout in seconds",
    )

    # =========================================================================
    # Loop Generation Tunables
    # =========================================================================

    stretch_factor: float = Field(default=constants.STRETCH_FACTOR, gt=0)
    distance_tolerance: float = Field(default=constants.DISTANCE_TOLERANCE, ge=0)
    max_retries: int = Field(default=constants.MAX_RETRIES, ge=0)
    max_unroutable_retries: int = Field(default=constants.MAX_UNROUTABLE_RETRIES, ge=1)
    max_waypoints: int = Field(default=constants.MAX_WAYPOINTS, ge=1)
    star_trim_fraction: float = Field(default=constants.STAR_TRIM_FRACTION, ge=0, lt=0.5)
    star_threshold_fraction: float = Field(default=constants.STAR_THRESHOLD_FRACTION, ge=0)
    star_rotation_deg: float = Field(default=constants.STAR_ROTATION_DEG)
    unroutable_rotation_deg: float = Field(default=constants.UNROUTABLE_ROTATION_DEG)
    unroutable_radius_shrink: float = Field(
        default=constants.UNROUTABLE_RADIUS_SHRINK, gt=0, le=1
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting ROAM_DEBUG.

        ROAM_DEBUG only applies when ROAM_LOG_LEVEL was left at its default.
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> RoamSettings:
    """
    Get the singleton settings instance.

    The settings are validated at first access.
    """
    return RoamSettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()

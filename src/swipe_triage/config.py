"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from swipe_triage.domain.gestures import GestureThresholds
from swipe_triage.domain.progression import ProgressionRules

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    analytics_url: str | None = None
    default_user_id: str = "current-user"
    swipe_distance_threshold: float = Field(default=100.0, gt=0)
    swipe_velocity_threshold: float = Field(default=500.0, gt=0)
    points_per_photo: int = 10
    streak_bonus_multiplier: float = 1.5
    session_completion_bonus: int = 50
    streak_day_points: int = 10
    xp_per_level_unit: int = Field(default=100, gt=0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def gesture_thresholds(settings: Settings) -> GestureThresholds:
    """Build classifier thresholds from settings."""
    return GestureThresholds(
        distance=settings.swipe_distance_threshold,
        velocity=settings.swipe_velocity_threshold,
    )


def progression_rules(settings: Settings) -> ProgressionRules:
    """Build scoring rules from settings."""
    return ProgressionRules(
        points_per_photo=settings.points_per_photo,
        streak_bonus_multiplier=settings.streak_bonus_multiplier,
        session_completion_bonus=settings.session_completion_bonus,
        streak_day_points=settings.streak_day_points,
        xp_per_level_unit=settings.xp_per_level_unit,
    )

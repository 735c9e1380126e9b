"""Pydantic models for API request payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from swipe_triage.domain.gestures import GestureSample


class GesturePayload(BaseModel):
    """Displacement and velocity of a completed gesture."""

    dx: float
    dy: float
    velocity_x: float = 0.0
    velocity_y: float = 0.0
    timestamp: float | None = None

    def to_sample(self) -> GestureSample:
        return GestureSample(
            dx=self.dx,
            dy=self.dy,
            velocity_x=self.velocity_x,
            velocity_y=self.velocity_y,
            timestamp=self.timestamp,
        )


class SwipeRequest(BaseModel):
    """Swipe command payload.

    Direction and velocity are validated by the swipe service so that bad
    values come back as a structured result.
    """

    photo_id: str
    direction: str
    velocity: float
    timestamp: datetime | None = None
    user_id: str | None = None


class GestureSwipeRequest(BaseModel):
    """Raw gesture to classify and apply to a photo."""

    photo_id: str
    gesture: GesturePayload
    user_id: str | None = None


class StreakRequest(BaseModel):
    """Streak update payload."""

    streak_days: int = Field(ge=0)

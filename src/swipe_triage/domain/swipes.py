"""Swipe command and result models."""

from dataclasses import dataclass
from datetime import datetime

from swipe_triage.domain.photos import PhotoAction, PhotoRecord
from swipe_triage.errors import ErrorCode


@dataclass(frozen=True)
class SwipeCommand:
    """Request to triage a photo with a swipe direction.

    The service validates these fields and reports malformed commands as a
    ``ValidationError`` result.
    """

    photo_id: str
    direction: str
    velocity: float
    timestamp: datetime | None
    user_id: str | None = None


@dataclass(frozen=True)
class SwipeResult:
    """Outcome of a swipe command."""

    success: bool
    action: PhotoAction | None = None
    points: int = 0
    new_level: int | None = None
    achievement_unlocked: str | None = None
    error: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "SwipeResult":
        """Build a failed result for an expected business error."""
        return cls(success=False, error=code, message=message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "action": self.action.value if self.action else None,
            "points": self.points,
        }
        if self.new_level is not None:
            payload["new_level"] = self.new_level
        if self.achievement_unlocked is not None:
            payload["achievement_unlocked"] = self.achievement_unlocked
        if self.error is not None:
            payload["error"] = self.error.value
            payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class SwipeQueryResult:
    """Read-only swipe information for a photo."""

    photo: PhotoRecord
    can_swipe: bool
    suggested_action: PhotoAction

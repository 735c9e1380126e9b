"""Domain models for user progression."""

from dataclasses import dataclass, field
from datetime import datetime

from swipe_triage.domain.photos import PhotoAction


@dataclass(frozen=True)
class UserStats:
    """Triage counters for a user."""

    total_processed: int = 0
    deleted: int = 0
    kept: int = 0
    shared: int = 0
    private: int = 0
    sessions_completed: int = 0
    streak_days: int = 0
    last_session_at: datetime | None = None


@dataclass(frozen=True)
class Achievement:
    """An unlocked achievement."""

    id: str
    name: str
    description: str
    icon: str
    unlocked_at: datetime
    progress: int = 1
    max_progress: int = 1


@dataclass(frozen=True)
class ProgressionState:
    """Score and achievement state for a single user.

    The level is not stored; it is derived from ``current_xp`` by the engine.
    """

    user_id: str
    stats: UserStats = field(default_factory=UserStats)
    achievements: tuple[Achievement, ...] = ()
    current_xp: int = 0
    total_points: int = 0

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("User ID cannot be empty")
        if self.current_xp < 0 or self.total_points < 0:
            raise ValueError("XP and points cannot be negative")

    def has_achievement(self, achievement_id: str) -> bool:
        return any(item.id == achievement_id for item in self.achievements)


@dataclass(frozen=True)
class ProgressionRules:
    """Point values and level curve used by the progression engine."""

    points_per_photo: int = 10
    streak_bonus_multiplier: float = 1.5
    session_completion_bonus: int = 50
    streak_day_points: int = 10
    xp_per_level_unit: int = 100

    def __post_init__(self) -> None:
        if self.xp_per_level_unit <= 0:
            raise ValueError("XP per level unit must be greater than 0")


@dataclass(frozen=True)
class PhotoProcessed:
    """A photo was triaged with the given action."""

    action: PhotoAction


@dataclass(frozen=True)
class SessionCompleted:
    """A triage session was finished."""


@dataclass(frozen=True)
class StreakMaintained:
    """The user kept a daily streak going."""

    streak_days: int


ProgressionEvent = PhotoProcessed | SessionCompleted | StreakMaintained


@dataclass(frozen=True)
class ProgressionOutcome:
    """Result of applying one event to a progression state."""

    state: ProgressionState
    points: int
    unlocked: tuple[str, ...]
    level: int
    leveled_up: bool


@dataclass(frozen=True)
class ProgressionSummary:
    """Read-only view of a user's progression."""

    user_id: str
    level: int
    current_xp: int
    total_points: int
    xp_for_next_level: int
    level_progress_percent: float
    efficiency_rating: int
    favorite_action: PhotoAction
    stats: UserStats
    achievements: list[str]

"""Scoring, leveling and achievements for photo triage."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol, assert_never

from swipe_triage.domain.photos import PhotoAction
from swipe_triage.domain.progression import (
    Achievement,
    PhotoProcessed,
    ProgressionEvent,
    ProgressionOutcome,
    ProgressionRules,
    ProgressionState,
    ProgressionSummary,
    SessionCompleted,
    StreakMaintained,
    UserStats,
)
from swipe_triage.services.locks import KeyedLock

logger = logging.getLogger(__name__)

# Ties in favorite_action go to the earliest entry.
FAVORITE_ACTION_PRIORITY: tuple[PhotoAction, ...] = (
    PhotoAction.DELETE,
    PhotoAction.KEEP,
    PhotoAction.SHARE,
    PhotoAction.PRIVATE,
)


@dataclass(frozen=True)
class AchievementDefinition:
    """A once-only milestone unlocked when its predicate holds."""

    id: str
    name: str
    description: str
    icon: str
    predicate: Callable[[UserStats], bool]


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id="first_photo",
        name="First Steps",
        description="Process your first photo",
        icon="🎯",
        predicate=lambda stats: stats.total_processed >= 1,
    ),
    AchievementDefinition(
        id="photo_master_100",
        name="Photo Master",
        description="Process 100 photos",
        icon="📸",
        predicate=lambda stats: stats.total_processed >= 100,
    ),
    AchievementDefinition(
        id="declutter_champion",
        name="Declutter Champion",
        description="Delete 50 photos",
        icon="🗑️",
        predicate=lambda stats: stats.deleted >= 50,
    ),
    AchievementDefinition(
        id="sharing_enthusiast",
        name="Sharing Enthusiast",
        description="Share 25 photos",
        icon="📤",
        predicate=lambda stats: stats.shared >= 25,
    ),
    AchievementDefinition(
        id="privacy_guardian",
        name="Privacy Guardian",
        description="Make 10 photos private",
        icon="🔒",
        predicate=lambda stats: stats.private >= 10,
    ),
    AchievementDefinition(
        id="streak_warrior",
        name="Streak Warrior",
        description="Maintain a 7-day streak",
        icon="🔥",
        predicate=lambda stats: stats.streak_days >= 7,
    ),
)


@dataclass
class ProgressionEngine:
    """Pure reducer from progression events to new progression state.

    Every method is total over well-typed input and returns new values; no
    state passed in is ever modified. Levels are computed from XP on demand
    and never read from stored state.
    """

    rules: ProgressionRules = field(default_factory=ProgressionRules)
    achievements: tuple[AchievementDefinition, ...] = ACHIEVEMENTS

    def apply_event(
        self,
        state: ProgressionState,
        event: ProgressionEvent,
        now: datetime | None = None,
    ) -> ProgressionState:
        """Return the state after applying ``event``."""
        return self.evaluate(state, event, now).state

    def evaluate(
        self,
        state: ProgressionState,
        event: ProgressionEvent,
        now: datetime | None = None,
    ) -> ProgressionOutcome:
        """Apply ``event`` and report points, unlocks and level changes."""
        timestamp = now or datetime.now(tz=UTC)
        match event:
            case PhotoProcessed(action=action):
                stats = _count_action(state.stats, action)
                points = self.photo_points(state.stats)
            case SessionCompleted():
                stats = replace(
                    state.stats,
                    sessions_completed=state.stats.sessions_completed + 1,
                    last_session_at=timestamp,
                )
                points = self.rules.session_completion_bonus
            case StreakMaintained(streak_days=streak_days):
                days = max(0, streak_days)
                stats = replace(state.stats, streak_days=days)
                points = math.floor(
                    days
                    * self.rules.streak_day_points
                    * self.rules.streak_bonus_multiplier
                )
            case _:
                assert_never(event)

        unlocked = self._unlock(state, stats, timestamp)
        current_xp = state.current_xp + points
        updated = replace(
            state,
            stats=stats,
            achievements=state.achievements + unlocked,
            current_xp=current_xp,
            total_points=state.total_points + points,
        )
        level = self.level_for_xp(current_xp)
        return ProgressionOutcome(
            state=updated,
            points=points,
            unlocked=tuple(item.id for item in unlocked),
            level=level,
            leveled_up=level > self.level_for_xp(state.current_xp),
        )

    def photo_points(self, stats: UserStats) -> int:
        """Points for one processed photo given the stats before processing."""
        points = self.rules.points_per_photo
        if stats.streak_days > 0:
            points = math.floor(points * self.rules.streak_bonus_multiplier)
        return points

    def level_for_xp(self, xp: int) -> int:
        """Return ``floor(sqrt(xp / unit)) + 1`` using exact integer math."""
        return math.isqrt(max(0, xp) // self.rules.xp_per_level_unit) + 1

    def xp_floor(self, level: int) -> int:
        """XP needed to reach ``level``."""
        return (max(1, level) - 1) ** 2 * self.rules.xp_per_level_unit

    def xp_for_next_level(self, level: int, current_xp: int) -> int:
        return self.xp_floor(level + 1) - current_xp

    def level_progress_percent(self, level: int, current_xp: int) -> float:
        floor_xp = self.xp_floor(level)
        span = self.xp_floor(level + 1) - floor_xp
        return min(100.0, max(0.0, 100 * (current_xp - floor_xp) / span))

    def reset_stats(self, state: ProgressionState) -> ProgressionState:
        """Zero the counters while keeping achievements, XP and points."""
        return replace(state, stats=UserStats())

    def summary(self, state: ProgressionState) -> ProgressionSummary:
        level = self.level_for_xp(state.current_xp)
        return ProgressionSummary(
            user_id=state.user_id,
            level=level,
            current_xp=state.current_xp,
            total_points=state.total_points,
            xp_for_next_level=self.xp_for_next_level(level, state.current_xp),
            level_progress_percent=self.level_progress_percent(
                level, state.current_xp
            ),
            efficiency_rating=efficiency_rating(state.stats),
            favorite_action=favorite_action(state.stats),
            stats=state.stats,
            achievements=[item.id for item in state.achievements],
        )

    def _unlock(
        self, state: ProgressionState, stats: UserStats, now: datetime
    ) -> tuple[Achievement, ...]:
        unlocked = []
        for definition in self.achievements:
            if state.has_achievement(definition.id) or not definition.predicate(stats):
                continue
            unlocked.append(
                Achievement(
                    id=definition.id,
                    name=definition.name,
                    description=definition.description,
                    icon=definition.icon,
                    unlocked_at=now,
                )
            )
        return tuple(unlocked)


def efficiency_rating(stats: UserStats) -> int:
    """Percentage of decisive (delete or keep) actions, rounded half up."""
    total = stats.total_processed
    if total <= 0:
        return 0
    decisive = stats.deleted + stats.kept
    return (200 * decisive + total) // (2 * total)


def favorite_action(stats: UserStats) -> PhotoAction:
    """Most used action; ties resolve by ``FAVORITE_ACTION_PRIORITY``."""
    counts = {
        PhotoAction.DELETE: stats.deleted,
        PhotoAction.KEEP: stats.kept,
        PhotoAction.SHARE: stats.shared,
        PhotoAction.PRIVATE: stats.private,
    }
    return max(FAVORITE_ACTION_PRIORITY, key=counts.__getitem__)


def _count_action(stats: UserStats, action: PhotoAction) -> UserStats:
    total = stats.total_processed + 1
    match action:
        case PhotoAction.DELETE:
            return replace(stats, total_processed=total, deleted=stats.deleted + 1)
        case PhotoAction.KEEP:
            return replace(stats, total_processed=total, kept=stats.kept + 1)
        case PhotoAction.SHARE:
            return replace(stats, total_processed=total, shared=stats.shared + 1)
        case PhotoAction.PRIVATE:
            return replace(stats, total_processed=total, private=stats.private + 1)
        case _:
            assert_never(action)


class ProgressionRepository(Protocol):
    """Persistence interface for progression state."""

    async def get_by_user_id(self, user_id: str) -> ProgressionState:
        """Return the user's state, or a fresh state for a new user."""

    async def update(self, state: ProgressionState) -> None:
        """Persist the user's state."""


@dataclass
class ProgressionService:
    """Loads, reduces and stores progression state one user at a time."""

    repository: ProgressionRepository
    engine: ProgressionEngine = field(default_factory=ProgressionEngine)
    locks: KeyedLock = field(default_factory=KeyedLock)

    async def apply(
        self, user_id: str, event: ProgressionEvent
    ) -> ProgressionOutcome:
        """Apply an event to the stored state and persist the result."""
        async with self.locks.hold(user_id):
            state = await self.repository.get_by_user_id(user_id)
            outcome = self.engine.evaluate(state, event)
            await self.repository.update(outcome.state)
        if outcome.unlocked:
            logger.info(
                "User %s unlocked achievements: %s",
                user_id,
                ", ".join(outcome.unlocked),
            )
        return outcome

    async def complete_session(self, user_id: str) -> ProgressionOutcome:
        return await self.apply(user_id, SessionCompleted())

    async def record_streak(self, user_id: str, streak_days: int) -> ProgressionOutcome:
        return await self.apply(user_id, StreakMaintained(streak_days=streak_days))

    async def reset_stats(self, user_id: str) -> ProgressionState:
        """Explicitly reset the user's counters."""
        async with self.locks.hold(user_id):
            state = await self.repository.get_by_user_id(user_id)
            updated = self.engine.reset_stats(state)
            await self.repository.update(updated)
        return updated

    async def get_summary(self, user_id: str) -> ProgressionSummary:
        state = await self.repository.get_by_user_id(user_id)
        return self.engine.summary(state)

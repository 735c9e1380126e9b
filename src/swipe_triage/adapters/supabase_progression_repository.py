"""Supabase repository for user progression."""

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any

from supabase import Client

from swipe_triage.adapters.supabase_query import run_query
from swipe_triage.domain.progression import Achievement, ProgressionState, UserStats
from swipe_triage.services.progression import ProgressionRepository

_COUNTER_FIELDS = tuple(
    item.name for item in fields(UserStats) if item.name != "last_session_at"
)


@dataclass
class SupabaseProgressionRepository(ProgressionRepository):
    """Stores one progression row per user with JSON stats and achievements."""

    client: Client

    async def get_by_user_id(self, user_id: str) -> ProgressionState:
        """Return the stored state, or a fresh one for unknown users."""
        rows = await run_query(
            self.client.table("user_progression")
            .select("user_id, stats, achievements, current_xp, total_points")
            .eq("user_id", user_id)
            .limit(1),
            "load progression",
        )
        if not rows:
            return ProgressionState(user_id=user_id)
        return _parse_row(rows[0])

    async def update(self, state: ProgressionState) -> None:
        """Upsert the user's progression row."""
        await run_query(
            self.client.table("user_progression").upsert(
                {
                    "user_id": state.user_id,
                    "stats": _serialize_stats(state.stats),
                    "achievements": [
                        _serialize_achievement(item) for item in state.achievements
                    ],
                    "current_xp": state.current_xp,
                    "total_points": state.total_points,
                },
                on_conflict="user_id",
            ),
            "update progression",
        )


def _serialize_stats(stats: UserStats) -> dict[str, object]:
    payload = asdict(stats)
    payload["last_session_at"] = (
        stats.last_session_at.isoformat() if stats.last_session_at else None
    )
    return payload


def _serialize_achievement(achievement: Achievement) -> dict[str, object]:
    payload = asdict(achievement)
    payload["unlocked_at"] = achievement.unlocked_at.isoformat()
    return payload


def _parse_row(row: dict[str, Any]) -> ProgressionState:
    raw_stats = row.get("stats") or {}
    last_session_at = raw_stats.get("last_session_at")
    stats = UserStats(
        **{key: int(raw_stats.get(key) or 0) for key in _COUNTER_FIELDS},
        last_session_at=datetime.fromisoformat(last_session_at)
        if last_session_at
        else None,
    )
    achievements = tuple(
        Achievement(
            id=str(item["id"]),
            name=str(item.get("name", "")),
            description=str(item.get("description", "")),
            icon=str(item.get("icon", "")),
            unlocked_at=datetime.fromisoformat(str(item["unlocked_at"])),
            progress=int(item.get("progress", 1)),
            max_progress=int(item.get("max_progress", 1)),
        )
        for item in row.get("achievements") or []
    )
    return ProgressionState(
        user_id=str(row["user_id"]),
        stats=stats,
        achievements=achievements,
        current_xp=int(row.get("current_xp") or 0),
        total_points=int(row.get("total_points") or 0),
    )

"""Tests for Supabase adapter implementations."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from swipe_triage.adapters.supabase_photo_repository import SupabasePhotoRepository
from swipe_triage.adapters.supabase_progression_repository import (
    SupabaseProgressionRepository,
)
from swipe_triage.domain.photos import PhotoAction, PhotoStatus
from swipe_triage.domain.progression import Achievement, ProgressionState, UserStats
from swipe_triage.errors import (
    AlreadyProcessedError,
    InvalidPhotoError,
    PhotoNotFoundError,
    RepositoryError,
)
from swipe_triage.services.lifecycle import apply_action
from swipe_triage.services.progression import ProgressionEngine
from tests.conftest import FIXED_TIME, make_photo


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload: object, on_conflict: str = "") -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _photo_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "photo-1",
        "uri": "file:///photos/photo-1.jpg",
        "width": 4032,
        "height": 3024,
        "file_size_bytes": 2_500_000,
        "mime_type": "image/jpeg",
        "created_at": FIXED_TIME.isoformat(),
        "modified_at": FIXED_TIME.isoformat(),
        "status": "pending",
        "processed_at": None,
        "applied_action": None,
        "latitude": None,
        "longitude": None,
    }
    row.update(overrides)
    return row


def test_supabase_photo_repository_loads_photo() -> None:
    client = FakeSupabaseClient()
    client.table("photos").queue(
        "select",
        [
            _photo_row(
                status="deleted",
                processed_at=FIXED_TIME.isoformat(),
                applied_action="delete",
            )
        ],
    )

    repository = SupabasePhotoRepository(client)
    photo = asyncio.run(repository.get_by_id("photo-1"))

    assert photo is not None
    assert photo.status is PhotoStatus.DELETED
    assert photo.applied_action is PhotoAction.DELETE
    assert photo.processed_at == FIXED_TIME
    assert client.tables["photos"].last_filters == [("id", "photo-1")]


def test_supabase_photo_repository_missing_photo() -> None:
    repository = SupabasePhotoRepository(FakeSupabaseClient())

    assert asyncio.run(repository.get_by_id("missing")) is None


def test_supabase_photo_repository_rejects_invalid_rows() -> None:
    client = FakeSupabaseClient()
    client.table("photos").queue("select", [_photo_row(uri="")])

    repository = SupabasePhotoRepository(client)

    with pytest.raises(InvalidPhotoError):
        asyncio.run(repository.get_by_id("photo-1"))


def test_supabase_photo_update_is_guarded_on_pending() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    photos_table.queue("update", [_photo_row(status="processed")])
    processed = apply_action(make_photo(), PhotoAction.KEEP, FIXED_TIME)

    asyncio.run(SupabasePhotoRepository(client).update(processed))

    assert photos_table.last_payload == {
        "status": "processed",
        "processed_at": FIXED_TIME.isoformat(),
        "applied_action": "keep",
    }
    assert photos_table.last_filters == [("id", "photo-1"), ("status", "pending")]


def test_supabase_photo_update_conflict_raises_already_processed() -> None:
    client = FakeSupabaseClient()
    processed = apply_action(make_photo(), PhotoAction.DELETE, FIXED_TIME)

    with pytest.raises(AlreadyProcessedError):
        asyncio.run(SupabasePhotoRepository(client).update(processed))


def test_supabase_photo_restore_of_missing_row_raises_not_found() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(PhotoNotFoundError):
        asyncio.run(SupabasePhotoRepository(client).update(make_photo()))

    assert client.tables["photos"].last_filters == [("id", "photo-1")]


def test_supabase_photo_repository_lists_and_deletes() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    photos_table.queue("select", [_photo_row(), _photo_row(id="photo-2")])

    repository = SupabasePhotoRepository(client)
    photos = asyncio.run(repository.get_all())
    asyncio.run(repository.delete("photo-2"))

    assert [photo.id for photo in photos] == ["photo-1", "photo-2"]
    assert photos_table.last_filters[-1] == ("id", "photo-2")


def test_supabase_failures_become_repository_errors() -> None:
    client = FakeSupabaseClient()
    client.table("photos").error = ConnectionError("connection reset")

    with pytest.raises(RepositoryError) as excinfo:
        asyncio.run(SupabasePhotoRepository(client).get_by_id("photo-1"))

    assert "load photo" in excinfo.value.message
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_supabase_progression_repository_new_user() -> None:
    repository = SupabaseProgressionRepository(FakeSupabaseClient())

    state = asyncio.run(repository.get_by_user_id("alice"))

    assert state == ProgressionState(user_id="alice")


def test_supabase_progression_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_progression")
    state = ProgressionState(
        user_id="alice",
        stats=UserStats(
            total_processed=3,
            deleted=2,
            kept=1,
            streak_days=2,
            last_session_at=datetime(2024, 4, 30, 9, 30, tzinfo=UTC),
        ),
        achievements=(
            Achievement(
                id="first_photo",
                name="First Steps",
                description="Process your first photo",
                icon="🎯",
                unlocked_at=FIXED_TIME,
            ),
        ),
        current_xp=35,
        total_points=35,
    )

    repository = SupabaseProgressionRepository(client)
    asyncio.run(repository.update(state))
    payload = table.last_payload
    assert isinstance(payload, dict)
    assert table.last_on_conflict == "user_id"
    assert "level" not in payload
    assert payload["stats"]["deleted"] == 2
    assert payload["achievements"][0]["unlocked_at"] == FIXED_TIME.isoformat()

    table.queue("select", [payload])
    loaded = asyncio.run(repository.get_by_user_id("alice"))

    assert loaded == state


def test_supabase_progression_ignores_stored_level_column() -> None:
    client = FakeSupabaseClient()
    client.table("user_progression").queue(
        "select",
        [
            {
                "user_id": "alice",
                "stats": {},
                "achievements": [],
                "level": 5,
                "current_xp": 0,
                "total_points": 0,
            }
        ],
    )

    state = asyncio.run(
        SupabaseProgressionRepository(client).get_by_user_id("alice")
    )
    summary = ProgressionEngine().summary(state)

    assert summary.level == 1
    assert summary.xp_for_next_level == 100

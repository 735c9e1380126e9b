"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from supabase import Client

from swipe_triage.adapters.supabase_query import run_query
from swipe_triage.domain.photos import PhotoAction, PhotoRecord, PhotoStatus
from swipe_triage.errors import AlreadyProcessedError, PhotoNotFoundError
from swipe_triage.services.lifecycle import validate_photo
from swipe_triage.services.swipes import PhotoRepository

_COLUMNS = (
    "id, uri, width, height, file_size_bytes, mime_type, created_at, modified_at, "
    "status, processed_at, applied_action, latitude, longitude"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo persistence."""

    client: Client

    async def get_by_id(self, photo_id: str) -> PhotoRecord | None:
        """Return a validated photo by id, if present."""
        rows = await run_query(
            self.client.table("photos").select(_COLUMNS).eq("id", photo_id).limit(1),
            "load photo",
        )
        if not rows:
            return None
        return validate_photo(_parse_row(rows[0]))

    async def update(self, photo: PhotoRecord) -> None:
        """Persist status changes, guarding the move out of PENDING."""
        query = (
            self.client.table("photos")
            .update(
                {
                    "status": photo.status.value,
                    "processed_at": _isoformat(photo.processed_at),
                    "applied_action": photo.applied_action.value
                    if photo.applied_action
                    else None,
                }
            )
            .eq("id", photo.id)
        )
        if photo.status != PhotoStatus.PENDING:
            query = query.eq("status", PhotoStatus.PENDING.value)
        rows = await run_query(query, "update photo")
        if rows:
            return
        if photo.status != PhotoStatus.PENDING:
            raise AlreadyProcessedError(f"Photo {photo.id} is no longer pending")
        raise PhotoNotFoundError(f"Photo {photo.id} not found")

    async def get_all(self) -> list[PhotoRecord]:
        """Return all photos ordered by creation time."""
        rows = await run_query(
            self.client.table("photos").select(_COLUMNS).order("created_at"),
            "list photos",
        )
        return [validate_photo(_parse_row(row)) for row in rows]

    async def delete(self, photo_id: str) -> None:
        """Delete a photo row."""
        await run_query(
            self.client.table("photos").delete().eq("id", photo_id), "delete photo"
        )


def _parse_row(row: dict[str, Any]) -> PhotoRecord:
    applied_action = row.get("applied_action")
    return PhotoRecord(
        id=str(row.get("id") or ""),
        uri=str(row.get("uri") or ""),
        width=int(row.get("width") or 0),
        height=int(row.get("height") or 0),
        file_size_bytes=int(row.get("file_size_bytes") or 0),
        mime_type=str(row.get("mime_type") or "image/jpeg"),
        created_at=_parse_datetime(row.get("created_at")) or datetime.min,
        modified_at=_parse_datetime(row.get("modified_at")) or datetime.min,
        status=PhotoStatus(row.get("status") or PhotoStatus.PENDING.value),
        processed_at=_parse_datetime(row.get("processed_at")),
        applied_action=PhotoAction(applied_action) if applied_action else None,
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
    )


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None

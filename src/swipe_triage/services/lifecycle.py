"""One-shot lifecycle for photo records."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import assert_never

from swipe_triage.domain.gestures import Direction
from swipe_triage.domain.photos import PhotoAction, PhotoRecord, PhotoStatus
from swipe_triage.errors import AlreadyProcessedError, InvalidPhotoError


def validate_photo(photo: PhotoRecord) -> PhotoRecord:
    """Check construction invariants and return the photo unchanged."""
    if not photo.id or not photo.id.strip():
        raise InvalidPhotoError("Photo ID cannot be empty")
    if not photo.uri or not photo.uri.strip():
        raise InvalidPhotoError("Photo URI cannot be empty")
    if photo.file_size_bytes <= 0:
        raise InvalidPhotoError("Photo file size must be greater than 0")
    if photo.width <= 0 or photo.height <= 0:
        raise InvalidPhotoError("Photo dimensions must be greater than 0")
    return photo


def action_for_direction(direction: Direction) -> PhotoAction:
    """Map a swipe direction to the action it triggers."""
    match direction:
        case Direction.LEFT:
            return PhotoAction.DELETE
        case Direction.RIGHT:
            return PhotoAction.KEEP
        case Direction.UP:
            return PhotoAction.SHARE
        case Direction.DOWN:
            return PhotoAction.PRIVATE
        case Direction.NONE:
            raise ValueError("No action is defined for an undecided gesture")
        case _:
            assert_never(direction)


def status_for_action(action: PhotoAction) -> PhotoStatus:
    """Map an action to the terminal status it produces."""
    match action:
        case PhotoAction.KEEP:
            return PhotoStatus.PROCESSED
        case PhotoAction.DELETE:
            return PhotoStatus.DELETED
        case PhotoAction.SHARE:
            return PhotoStatus.SHARED
        case PhotoAction.PRIVATE:
            return PhotoStatus.PRIVATE
        case _:
            assert_never(action)


def apply_action(
    photo: PhotoRecord, action: PhotoAction, now: datetime | None = None
) -> PhotoRecord:
    """Return a new record with the action applied.

    Only pending photos can transition, and each transition is terminal.
    The input record is never modified.
    """
    if photo.status != PhotoStatus.PENDING:
        raise AlreadyProcessedError(
            f"Photo {photo.id} has already been processed ({photo.status})"
        )
    return replace(
        photo,
        status=status_for_action(action),
        processed_at=now or datetime.now(tz=UTC),
        applied_action=action,
    )


def suggest_action(photo: PhotoRecord) -> PhotoAction:
    """Suggest an action from file size alone.

    Placeholder heuristic, not a learned model: tiny files are likely
    thumbnails or screenshots worth deleting; everything else is kept.
    """
    if photo.file_size_bytes < 50_000:
        return PhotoAction.DELETE
    if photo.file_size_bytes > 10_000_000:
        return PhotoAction.KEEP
    return PhotoAction.KEEP

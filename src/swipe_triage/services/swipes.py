"""Swipe command orchestration."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from swipe_triage.domain.gestures import SWIPE_DIRECTIONS, Direction, GestureSample
from swipe_triage.domain.photos import PhotoAction, PhotoRecord
from swipe_triage.domain.progression import PhotoProcessed
from swipe_triage.domain.swipes import SwipeCommand, SwipeQueryResult, SwipeResult
from swipe_triage.errors import (
    AlreadyProcessedError,
    PhotoNotFoundError,
    SwipeValidationError,
    TriageError,
)
from swipe_triage.services.gestures import GestureClassifier, speed_of
from swipe_triage.services.lifecycle import (
    action_for_direction,
    apply_action,
    suggest_action,
)
from swipe_triage.services.locks import KeyedLock
from swipe_triage.services.progression import ProgressionService

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo records."""

    async def get_by_id(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    async def update(self, photo: PhotoRecord) -> None:
        """Persist a photo record.

        Moving a record out of PENDING must fail with AlreadyProcessedError
        when the stored record has already left PENDING.
        """

    async def get_all(self) -> list[PhotoRecord]:
        """Return all photo records."""

    async def delete(self, photo_id: str) -> None:
        """Delete a photo record."""


class AnalyticsCollector(Protocol):
    """Best-effort sink for swipe analytics."""

    async def track_swipe(
        self,
        *,
        photo_id: str,
        action: PhotoAction,
        direction: Direction,
        velocity: float,
        timestamp: datetime,
    ) -> None:
        """Record a completed swipe."""


@dataclass
class SwipeService:
    """Coordinates classification, photo lifecycle and progression per swipe."""

    photo_repository: PhotoRepository
    progression_service: ProgressionService
    analytics: AnalyticsCollector | None = None
    classifier: GestureClassifier = field(default_factory=GestureClassifier)
    default_user_id: str = "current-user"
    photo_locks: KeyedLock = field(default_factory=KeyedLock)

    async def execute_swipe_command(self, command: SwipeCommand) -> SwipeResult:
        """Triage a photo and report points, level and achievement changes.

        Expected business failures are returned as unsuccessful results;
        anything else propagates. Analytics run after the photo lock is
        released.
        """
        try:
            direction = _validate_command(command)
            async with self.photo_locks.hold(command.photo_id):
                result = await self._process(command, direction)
        except TriageError as exc:
            logger.info(
                "Swipe on photo %s rejected: %s (%s)",
                command.photo_id,
                exc.code.value,
                exc.message,
            )
            return SwipeResult.failure(exc.code, exc.message)
        if result.action is not None:
            await self._track(command, result.action, direction)
        return result

    async def execute_gesture(
        self, photo_id: str, sample: GestureSample, user_id: str | None = None
    ) -> SwipeResult:
        """Classify a raw gesture and execute the resulting swipe."""
        direction = self.classifier.classify(sample)
        if direction is Direction.NONE:
            return SwipeResult.failure(
                SwipeValidationError.code,
                "Gesture did not cross the distance or velocity threshold",
            )
        command = SwipeCommand(
            photo_id=photo_id,
            direction=direction.value,
            velocity=speed_of(sample),
            timestamp=datetime.now(tz=UTC),
            user_id=user_id,
        )
        return await self.execute_swipe_command(command)

    async def execute_swipe_query(self, photo_id: str) -> SwipeQueryResult | None:
        """Return swipe information for a photo without changing anything.

        Returns None for an unknown photo. Storage failures and invalid stored
        records are raised as RepositoryError and InvalidPhotoError.
        """
        photo = await self.photo_repository.get_by_id(photo_id)
        if photo is None:
            return None
        return SwipeQueryResult(
            photo=photo,
            can_swipe=photo.can_be_processed,
            suggested_action=suggest_action(photo),
        )

    async def _process(
        self, command: SwipeCommand, direction: Direction
    ) -> SwipeResult:
        photo = await self.photo_repository.get_by_id(command.photo_id)
        if photo is None:
            raise PhotoNotFoundError(f"Photo {command.photo_id} not found")
        if not photo.can_be_processed:
            raise AlreadyProcessedError(
                f"Photo {photo.id} has already been processed ({photo.status})"
            )

        action = action_for_direction(direction)
        processed = apply_action(photo, action)
        await self.photo_repository.update(processed)

        user_id = command.user_id or self.default_user_id
        try:
            outcome = await self.progression_service.apply(
                user_id, PhotoProcessed(action=action)
            )
        except Exception:
            await self._restore(photo)
            raise

        return SwipeResult(
            success=True,
            action=action,
            points=outcome.points,
            new_level=outcome.level if outcome.leveled_up else None,
            achievement_unlocked=outcome.unlocked[0] if outcome.unlocked else None,
        )

    async def _restore(self, photo: PhotoRecord) -> None:
        """Write back the pending record after a failed progression update."""
        try:
            await self.photo_repository.update(photo)
        except Exception:
            logger.exception("Failed to restore photo %s to pending", photo.id)

    async def _track(
        self, command: SwipeCommand, action: PhotoAction, direction: Direction
    ) -> None:
        if self.analytics is None:
            return
        try:
            await self.analytics.track_swipe(
                photo_id=command.photo_id,
                action=action,
                direction=direction,
                velocity=command.velocity,
                timestamp=command.timestamp or datetime.now(tz=UTC),
            )
        except Exception:
            logger.exception("Failed to track swipe for photo %s", command.photo_id)


def _validate_command(command: SwipeCommand) -> Direction:
    if not isinstance(command.photo_id, str) or not command.photo_id.strip():
        raise SwipeValidationError("Photo ID is required")
    if command.direction not in SWIPE_DIRECTIONS:
        raise SwipeValidationError(f"Invalid swipe direction: {command.direction!r}")
    if not isinstance(command.velocity, int | float) or command.velocity < 0:
        raise SwipeValidationError("Velocity cannot be negative")
    if command.timestamp is None:
        raise SwipeValidationError("Timestamp is required")
    if command.user_id is not None and not command.user_id.strip():
        raise SwipeValidationError("User ID cannot be blank")
    return Direction(command.direction)

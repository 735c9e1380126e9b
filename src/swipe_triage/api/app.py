"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from swipe_triage.api.models import (
    GesturePayload,
    GestureSwipeRequest,
    StreakRequest,
    SwipeRequest,
)
from swipe_triage.app_logging import configure_logging
from swipe_triage.containers import AppContainer
from swipe_triage.domain.photos import PhotoRecord
from swipe_triage.domain.progression import ProgressionOutcome, ProgressionSummary
from swipe_triage.domain.swipes import SwipeCommand, SwipeResult
from swipe_triage.errors import ErrorCode, TriageError
from swipe_triage.services.gestures import distance_of, speed_of

_ERROR_STATUS = {
    ErrorCode.VALIDATION: 422,
    ErrorCode.INVALID_PHOTO: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_PROCESSED: 409,
    ErrorCode.REPOSITORY: 503,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(TriageError)
    async def triage_error_handler(request: Request, exc: TriageError) -> JSONResponse:
        return JSONResponse(
            status_code=_ERROR_STATUS[exc.code],
            content={"error": exc.code.value, "message": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/gestures/classify")
    async def classify_gesture(
        payload: GesturePayload, request: Request
    ) -> dict[str, object]:
        """Classify a gesture without touching any photo."""
        classifier = _container(request).gesture_classifier
        sample = payload.to_sample()
        speed = speed_of(sample)
        distance = distance_of(sample)
        return {
            "direction": classifier.classify(sample).value,
            "confidence": classifier.confidence(speed, distance),
            "significant": classifier.is_gesture_significant(speed, distance),
        }

    @app.post("/swipes")
    async def swipe(payload: SwipeRequest, request: Request) -> JSONResponse:
        """Apply a swipe command to a photo."""
        result = await _container(request).swipe_service.execute_swipe_command(
            SwipeCommand(
                photo_id=payload.photo_id,
                direction=payload.direction,
                velocity=payload.velocity,
                timestamp=payload.timestamp,
                user_id=payload.user_id,
            )
        )
        return _swipe_response(result)

    @app.post("/swipes/gesture")
    async def swipe_gesture(
        payload: GestureSwipeRequest, request: Request
    ) -> JSONResponse:
        """Classify a raw gesture and apply it to a photo."""
        result = await _container(request).swipe_service.execute_gesture(
            payload.photo_id, payload.gesture.to_sample(), user_id=payload.user_id
        )
        return _swipe_response(result)

    @app.get("/photos/{photo_id}/swipe")
    async def swipe_info(photo_id: str, request: Request) -> dict[str, object]:
        """Return whether a photo can be swiped and a suggested action."""
        query = await _container(request).swipe_service.execute_swipe_query(photo_id)
        if query is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {
            "photo": _serialize_photo(query.photo),
            "can_swipe": query.can_swipe,
            "suggested_action": query.suggested_action.value,
        }

    @app.get("/users/{user_id}/progression")
    async def progression(user_id: str, request: Request) -> dict[str, object]:
        """Return the user's level, XP and achievements."""
        service = _container(request).progression_service
        return _serialize_summary(await service.get_summary(user_id))

    @app.post("/users/{user_id}/sessions")
    async def complete_session(user_id: str, request: Request) -> dict[str, object]:
        """Record a completed triage session."""
        service = _container(request).progression_service
        return _serialize_outcome(await service.complete_session(user_id))

    @app.post("/users/{user_id}/streak")
    async def record_streak(
        user_id: str, payload: StreakRequest, request: Request
    ) -> dict[str, object]:
        """Record the user's current daily streak."""
        service = _container(request).progression_service
        return _serialize_outcome(
            await service.record_streak(user_id, payload.streak_days)
        )

    @app.post("/users/{user_id}/reset")
    async def reset_stats(user_id: str, request: Request) -> dict[str, object]:
        """Reset the user's triage counters."""
        service = _container(request).progression_service
        await service.reset_stats(user_id)
        return _serialize_summary(await service.get_summary(user_id))

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _swipe_response(result: SwipeResult) -> JSONResponse:
    status_code = status.HTTP_200_OK
    if result.error is not None:
        status_code = _ERROR_STATUS[result.error]
    return JSONResponse(status_code=status_code, content=result.to_dict())


def _serialize_photo(photo: PhotoRecord) -> dict[str, object]:
    return {
        "id": photo.id,
        "uri": photo.uri,
        "width": photo.width,
        "height": photo.height,
        "file_size_bytes": photo.file_size_bytes,
        "formatted_file_size": photo.formatted_file_size,
        "mime_type": photo.mime_type,
        "orientation": _orientation(photo),
        "status": photo.status.value,
        "processed_at": photo.processed_at.isoformat() if photo.processed_at else None,
        "applied_action": photo.applied_action.value if photo.applied_action else None,
    }


def _orientation(photo: PhotoRecord) -> str:
    if photo.is_square():
        return "square"
    return "landscape" if photo.is_landscape else "portrait"


def _serialize_summary(summary: ProgressionSummary) -> dict[str, object]:
    stats = asdict(summary.stats)
    stats["last_session_at"] = (
        summary.stats.last_session_at.isoformat()
        if summary.stats.last_session_at
        else None
    )
    return {
        "user_id": summary.user_id,
        "level": summary.level,
        "current_xp": summary.current_xp,
        "total_points": summary.total_points,
        "xp_for_next_level": summary.xp_for_next_level,
        "level_progress_percent": summary.level_progress_percent,
        "efficiency_rating": summary.efficiency_rating,
        "favorite_action": summary.favorite_action.value,
        "stats": stats,
        "achievements": summary.achievements,
    }


def _serialize_outcome(outcome: ProgressionOutcome) -> dict[str, object]:
    return {
        "points": outcome.points,
        "level": outcome.level,
        "leveled_up": outcome.leveled_up,
        "achievements_unlocked": list(outcome.unlocked),
        "total_points": outcome.state.total_points,
    }

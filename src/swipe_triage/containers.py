"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from swipe_triage.adapters.httpx_analytics_collector import HttpxAnalyticsCollector
from swipe_triage.adapters.logging_analytics_collector import (
    LoggingAnalyticsCollector,
)
from swipe_triage.adapters.supabase_photo_repository import SupabasePhotoRepository
from swipe_triage.adapters.supabase_progression_repository import (
    SupabaseProgressionRepository,
)
from swipe_triage.config import Settings, gesture_thresholds, progression_rules
from swipe_triage.services.gestures import GestureClassifier
from swipe_triage.services.progression import ProgressionEngine, ProgressionService
from swipe_triage.services.swipes import AnalyticsCollector, SwipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    gesture_classifier: GestureClassifier
    progression_service: ProgressionService
    swipe_service: SwipeService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    progression_repository = SupabaseProgressionRepository(supabase_client)

    http_collector: HttpxAnalyticsCollector | None = None
    analytics: AnalyticsCollector
    if resolved_settings.analytics_url:
        http_collector = HttpxAnalyticsCollector.create(resolved_settings.analytics_url)
        analytics = http_collector
    else:
        analytics = LoggingAnalyticsCollector()

    gesture_classifier = GestureClassifier(gesture_thresholds(resolved_settings))
    progression_service = ProgressionService(
        repository=progression_repository,
        engine=ProgressionEngine(progression_rules(resolved_settings)),
    )
    swipe_service = SwipeService(
        photo_repository=photo_repository,
        progression_service=progression_service,
        analytics=analytics,
        classifier=gesture_classifier,
        default_user_id=resolved_settings.default_user_id,
    )

    async def close_resources() -> None:
        if http_collector is not None:
            await http_collector.close()

    return AppContainer(
        settings=resolved_settings,
        gesture_classifier=gesture_classifier,
        progression_service=progression_service,
        swipe_service=swipe_service,
        close_resources=close_resources,
    )

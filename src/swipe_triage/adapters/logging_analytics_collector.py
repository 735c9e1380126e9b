"""Analytics collector that writes swipe events to the log."""

import logging
from dataclasses import dataclass
from datetime import datetime

from swipe_triage.domain.gestures import Direction
from swipe_triage.domain.photos import PhotoAction
from swipe_triage.services.swipes import AnalyticsCollector

logger = logging.getLogger(__name__)


@dataclass
class LoggingAnalyticsCollector(AnalyticsCollector):
    """Used when no analytics endpoint is configured."""

    async def track_swipe(
        self,
        *,
        photo_id: str,
        action: PhotoAction,
        direction: Direction,
        velocity: float,
        timestamp: datetime,
    ) -> None:
        logger.info(
            "swipe photo=%s action=%s direction=%s velocity=%.1f at=%s",
            photo_id,
            action.value,
            direction.value,
            velocity,
            timestamp.isoformat(),
        )

"""HTTP analytics collector adapter."""

from dataclasses import dataclass
from datetime import datetime

import httpx

from swipe_triage.domain.gestures import Direction
from swipe_triage.domain.photos import PhotoAction
from swipe_triage.services.swipes import AnalyticsCollector


@dataclass
class HttpxAnalyticsCollector(AnalyticsCollector):
    """Posts swipe events as JSON to an analytics endpoint."""

    endpoint_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, endpoint_url: str) -> "HttpxAnalyticsCollector":
        """Create a collector with a managed httpx session."""
        return cls(endpoint_url=endpoint_url, http_client=httpx.AsyncClient())

    async def track_swipe(
        self,
        *,
        photo_id: str,
        action: PhotoAction,
        direction: Direction,
        velocity: float,
        timestamp: datetime,
    ) -> None:
        """Send a swipe event."""
        payload: dict[str, object] = {
            "event": "swipe",
            "photo_id": photo_id,
            "action": action.value,
            "direction": direction.value,
            "velocity": velocity,
            "timestamp": timestamp.isoformat(),
        }
        response = await self.http_client.post(
            self.endpoint_url, json=payload, timeout=5
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

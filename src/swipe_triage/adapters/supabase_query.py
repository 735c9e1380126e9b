"""Async execution of Supabase queries."""

import asyncio
from typing import Any, Protocol

from swipe_triage.errors import RepositoryError


class SupabaseQuery(Protocol):
    """A built PostgREST request ready to execute."""

    def execute(self) -> Any:
        """Run the request and return the API response."""


async def run_query(query: SupabaseQuery, description: str) -> list[dict[str, Any]]:
    """Execute a query off the event loop and return its rows."""
    try:
        response = await asyncio.to_thread(query.execute)
    except Exception as exc:
        raise RepositoryError(f"Failed to {description}: {exc}") from exc
    return list(response.data or [])

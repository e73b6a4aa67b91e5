"""Shared helpers for Supabase query execution."""

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from poker_tracker.domain.errors import StoreError

_logger = logging.getLogger(__name__)


class ExecutableQuery(Protocol):
    """A built PostgREST request waiting to be sent."""

    def execute(self) -> Any:
        """Send the request and return the API response."""


def execute(query: ExecutableQuery, action: str) -> list[dict[str, Any]]:
    """Run a query and return its rows, converting failures to StoreError."""
    try:
        response = query.execute()
    except (APIError, httpx.HTTPError) as exc:
        _logger.warning("Supabase request failed: action=%s error=%s", action, exc)
        raise StoreError(f"Failed to {action}") from exc
    return response.data or []


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO timestamp column, falling back to datetime.min."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.min

"""Shared helpers for the Supabase adapters."""

from datetime import datetime
from typing import Any

from postgrest.exceptions import APIError
from supabase import AuthError

from baby_profiles.domain.errors import StoreError


def execute(query: Any) -> Any:
    """Execute a PostgREST query, raising StoreError on failure."""
    try:
        return query.execute()
    except APIError as exc:
        raise StoreError(exc.message or str(exc), code=exc.code) from exc


def auth_store_error(exc: AuthError) -> StoreError:
    """Wrap an auth subsystem error."""
    message = getattr(exc, "message", None) or str(exc)
    return StoreError(message, code=getattr(exc, "code", None))


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp column, tolerating nulls."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None

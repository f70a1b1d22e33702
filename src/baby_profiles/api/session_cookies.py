"""Auth cookie transport for per-caller token storage."""

import logging
from collections.abc import Mapping

from fastapi import Response

from baby_profiles.adapters.cookie_session_storage import CookieSessionStorage
from baby_profiles.config import Settings, uses_secure_cookies

logger = logging.getLogger(__name__)

AUTH_COOKIE = "bp-auth"
CHUNK_SIZE = 3000
MAX_CHUNKS = 8


def _chunk_name(index: int) -> str:
    return f"{AUTH_COOKIE}.{index}"


def read_storage(cookies: Mapping[str, str]) -> CookieSessionStorage:
    """Rebuild the caller's token storage from its chunked auth cookie."""
    chunks: list[str] = []
    for index in range(MAX_CHUNKS):
        chunk = cookies.get(_chunk_name(index))
        if chunk is None:
            break
        chunks.append(chunk)
    return CookieSessionStorage.from_cookie_value("".join(chunks))


def write_storage(
    response: Response,
    storage: CookieSessionStorage,
    cookies: Mapping[str, str],
    settings: Settings,
) -> None:
    """Rewrite the auth cookie when the storage changed during the request."""
    if not storage.changed:
        return
    value = storage.to_cookie_value()
    chunks = [
        value[start : start + CHUNK_SIZE] for start in range(0, len(value), CHUNK_SIZE)
    ]
    if len(chunks) > MAX_CHUNKS:
        logger.error("Auth cookie too large, dropping it", extra={"size": len(value)})
        chunks = []
    for index, chunk in enumerate(chunks):
        response.set_cookie(
            key=_chunk_name(index),
            value=chunk,
            max_age=settings.auth_cookie_max_age_seconds,
            path="/",
            httponly=True,
            secure=uses_secure_cookies(settings.site_url),
            samesite="lax",
        )
    for index in range(len(chunks), MAX_CHUNKS):
        if _chunk_name(index) in cookies:
            response.delete_cookie(key=_chunk_name(index), path="/")

"""Conversion of store errors into caller-facing errors."""

import logging

from baby_profiles.domain.errors import (
    Forbidden,
    RecordsError,
    RemoteFailure,
    StoreError,
)

logger = logging.getLogger(__name__)


def convert_store_error(exc: StoreError, action: str) -> RecordsError:
    """Map a store error that has no action-specific meaning."""
    logger.warning(
        "Store call failed",
        extra={"action": action, "code": exc.code, "detail": exc.message},
    )
    if exc.is_permission_denied:
        return Forbidden("You do not have permission to do that.")
    return RemoteFailure(exc.message)

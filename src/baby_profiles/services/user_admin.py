"""Account administration through privileged store procedures."""

import logging
from dataclasses import dataclass
from typing import Protocol

from baby_profiles.domain.errors import (
    ConfirmationRequired,
    StoreError,
    ValidationFailed,
)
from baby_profiles.domain.models import ROLES, UserAccount
from baby_profiles.services.sessions import SessionManager
from baby_profiles.services.store_errors import convert_store_error

logger = logging.getLogger(__name__)


class UserAdminRepository(Protocol):
    """Privileged procedures for account administration."""

    def list_users(self) -> list[UserAccount]:
        """Return every account."""

    def update_role(self, user_id: str, role: str) -> None:
        """Set the role claim of an account."""

    def delete_user(self, user_id: str) -> None:
        """Delete an account."""


@dataclass
class UserAdminService:
    """Service behind the system management pages.

    Every call goes through a store procedure that checks the caller's role
    itself; a refusal there surfaces as Forbidden regardless of what the
    route guard decided.
    """

    repository: UserAdminRepository
    session_manager: SessionManager

    def list_users(self) -> list[UserAccount]:
        """Return all accounts."""
        self.session_manager.require_session()
        try:
            return self.repository.list_users()
        except StoreError as exc:
            raise convert_store_error(exc, "list_users") from exc

    def update_role(self, user_id: str, role: str) -> None:
        """Change the role of an account."""
        session = self.session_manager.require_session()
        if role not in ROLES:
            raise ValidationFailed(f"Unknown role: {role!r}.")
        try:
            self.repository.update_role(user_id, role)
        except StoreError as exc:
            raise convert_store_error(exc, "update_role") from exc
        logger.info(
            "Role updated",
            extra={"user_id": user_id, "role": role, "actor": session.user_id},
        )

    def delete_user(self, user_id: str, confirmed: bool = False) -> None:
        """Delete an account once the caller has confirmed."""
        session = self.session_manager.require_session()
        if not confirmed:
            raise ConfirmationRequired("Confirm to delete this user.")
        try:
            self.repository.delete_user(user_id)
        except StoreError as exc:
            raise convert_store_error(exc, "delete_user") from exc
        logger.info(
            "User deleted", extra={"user_id": user_id, "actor": session.user_id}
        )

"""Baby record management."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from baby_profiles.domain.errors import (
    ConfirmationRequired,
    DuplicateIdentity,
    RecordNotFound,
    StoreError,
    ValidationFailed,
)
from baby_profiles.domain.identity import baby_identifier, normalize_name
from baby_profiles.domain.models import Baby, BabyChoice, Session
from baby_profiles.services.sessions import SessionManager
from baby_profiles.services.store_errors import convert_store_error

UNKNOWN_ACTOR = "Unknown User"


class BabyRepository(Protocol):
    """Persistence interface for babies."""

    def list_babies(self, user_id: str) -> list[Baby]:
        """Return the owner's babies, newest first."""

    def list_choices(self, user_id: str) -> list[BabyChoice]:
        """Return id and name of the owner's babies, ordered by name."""

    def get_baby(self, user_id: str, baby_id: str) -> Baby | None:
        """Return one of the owner's babies, if present."""

    def create_baby(self, baby: Baby) -> None:
        """Insert a baby row."""

    def update_baby(  # noqa: PLR0913
        self,
        user_id: str,
        baby_id: str,
        name: str,
        dob: date,
        note: str,
        updated_at: datetime,
        updated_by: str,
    ) -> Baby | None:
        """Update one of the owner's babies and return it, if it matched."""

    def delete_baby(self, user_id: str, baby_id: str) -> bool:
        """Delete one of the owner's babies; return True when a row matched."""


def actor_name(session: Session) -> str:
    """Return the name recorded in created_by/updated_by columns."""
    return session.email or UNKNOWN_ACTOR


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class BabyService:
    """Owner-scoped CRUD for babies."""

    repository: BabyRepository
    session_manager: SessionManager
    clock: Callable[[], datetime] = utc_now

    def list_babies(self) -> list[Baby]:
        """Return the caller's babies."""
        session = self.session_manager.require_session()
        try:
            return self.repository.list_babies(session.user_id)
        except StoreError as exc:
            raise convert_store_error(exc, "list_babies") from exc

    def list_baby_choices(self) -> list[BabyChoice]:
        """Return the caller's babies for selection lists."""
        session = self.session_manager.require_session()
        try:
            return self.repository.list_choices(session.user_id)
        except StoreError as exc:
            raise convert_store_error(exc, "list_baby_choices") from exc

    def get_baby(self, baby_id: str) -> Baby:
        """Return one of the caller's babies."""
        session = self.session_manager.require_session()
        try:
            baby = self.repository.get_baby(session.user_id, baby_id)
        except StoreError as exc:
            raise convert_store_error(exc, "get_baby") from exc
        if baby is None:
            raise RecordNotFound(f"Baby {baby_id} was not found.")
        return baby

    def create_baby(self, name: str, dob: date, note: str = "") -> Baby:
        """Create a baby keyed by name and date of birth."""
        session = self.session_manager.require_session()
        baby_id = baby_identifier(name, dob)
        now = self.clock()
        actor = actor_name(session)
        baby = Baby(
            id=baby_id,
            user_id=session.user_id,
            name=normalize_name(name),
            dob=dob,
            note=note,
            created_at=now,
            created_by=actor,
            updated_at=now,
            updated_by=actor,
        )
        try:
            self.repository.create_baby(baby)
        except StoreError as exc:
            if exc.is_unique_violation:
                raise DuplicateIdentity(
                    "A baby with this name and date of birth already exists. "
                    "Use a different name."
                ) from exc
            raise convert_store_error(exc, "create_baby") from exc
        return baby

    def update_baby(self, baby_id: str, name: str, dob: date, note: str = "") -> Baby:
        """Edit a baby; its identifier is kept even when name or date change."""
        session = self.session_manager.require_session()
        normalized = normalize_name(name)
        if not normalized:
            raise ValidationFailed("Baby name is required.")
        try:
            updated = self.repository.update_baby(
                user_id=session.user_id,
                baby_id=baby_id,
                name=normalized,
                dob=dob,
                note=note,
                updated_at=self.clock(),
                updated_by=actor_name(session),
            )
        except StoreError as exc:
            raise convert_store_error(exc, "update_baby") from exc
        if updated is None:
            raise RecordNotFound(f"Baby {baby_id} was not found.")
        return updated

    def delete_baby(self, baby_id: str, confirmed: bool = False) -> None:
        """Delete a baby once the caller has confirmed."""
        session = self.session_manager.require_session()
        if not confirmed:
            raise ConfirmationRequired("Confirm to delete this baby.")
        try:
            deleted = self.repository.delete_baby(session.user_id, baby_id)
        except StoreError as exc:
            raise convert_store_error(exc, "delete_baby") from exc
        if not deleted:
            raise RecordNotFound(f"Baby {baby_id} was not found.")

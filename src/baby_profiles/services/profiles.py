"""Assessment profile management."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from baby_profiles.domain.errors import (
    ConfirmationRequired,
    RecordNotFound,
    StoreError,
    TransientAllocationConflict,
    ValidationFailed,
)
from baby_profiles.domain.identity import profile_identifier, profile_sequence
from baby_profiles.domain.models import Profile, ProfileAnswers
from baby_profiles.services.babies import BabyRepository, actor_name, utc_now
from baby_profiles.services.sessions import SessionManager
from baby_profiles.services.store_errors import convert_store_error

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def count_profiles(self, baby_id: str) -> int:
        """Return how many profiles exist for a baby, across all owners."""

    def list_profile_ids(self, baby_id: str) -> list[str]:
        """Return the identifiers of every profile of a baby."""

    def create_profile(self, profile: Profile) -> None:
        """Insert a profile row."""

    def list_profiles(self, user_id: str, baby_id: str) -> list[Profile]:
        """Return the owner's profiles for a baby, newest first."""

    def get_profile(self, user_id: str, profile_id: str) -> Profile | None:
        """Return one of the owner's profiles, if present."""

    def update_profile(
        self,
        user_id: str,
        profile_id: str,
        answers: ProfileAnswers,
        updated_at: datetime,
        updated_by: str,
    ) -> Profile | None:
        """Replace a profile's answers and return it, if it matched."""

    def delete_profile(self, user_id: str, profile_id: str) -> bool:
        """Delete one of the owner's profiles; return True when a row matched."""


def validate_answers(answers: ProfileAnswers) -> ProfileAnswers:
    """Return a copy of the answers, rejecting empty or malformed input."""
    if not answers:
        raise ValidationFailed("Please answer every question.")
    cleaned: ProfileAnswers = {}
    for key, value in answers.items():
        if not isinstance(key, str) or not key.strip():
            raise ValidationFailed("Question keys must be non-empty strings.")
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            raise ValidationFailed(f"Unsupported answer for {key!r}.")
        cleaned[key] = value
    return cleaned


@dataclass
class ProfileService:
    """Owner-scoped CRUD for profiles with sequential identifiers.

    A new profile gets ``<baby_id>_<count + 1>``. The count is read right
    before each insert, so two writers can pick the same number; the store's
    primary key rejects the loser, which re-reads the count and tries again
    until ``max_attempts`` is spent. When a re-read count yields the id that
    just collided, the number is held by a row that survived a deletion; the
    remaining attempts then use the highest existing suffix plus one.
    """

    repository: ProfileRepository
    baby_repository: BabyRepository
    session_manager: SessionManager
    max_attempts: int = 3
    clock: Callable[[], datetime] = utc_now

    def list_profiles(self, baby_id: str) -> list[Profile]:
        """Return the caller's profiles for a baby."""
        session = self.session_manager.require_session()
        try:
            return self.repository.list_profiles(session.user_id, baby_id)
        except StoreError as exc:
            raise convert_store_error(exc, "list_profiles") from exc

    def get_profile(self, profile_id: str) -> Profile:
        """Return one of the caller's profiles."""
        session = self.session_manager.require_session()
        try:
            profile = self.repository.get_profile(session.user_id, profile_id)
        except StoreError as exc:
            raise convert_store_error(exc, "get_profile") from exc
        if profile is None:
            raise RecordNotFound(f"Profile {profile_id} was not found.")
        return profile

    def create_profile(self, baby_id: str, answers: ProfileAnswers) -> Profile:
        """Create the next profile for one of the caller's babies."""
        session = self.session_manager.require_session()
        cleaned = validate_answers(answers)
        try:
            baby = self.baby_repository.get_baby(session.user_id, baby_id)
        except StoreError as exc:
            raise convert_store_error(exc, "create_profile") from exc
        if baby is None:
            raise RecordNotFound(f"Baby {baby_id} was not found.")

        actor = actor_name(session)
        collided: str | None = None
        use_highest = False
        for attempt in range(1, max(self.max_attempts, 1) + 1):
            try:
                existing = self.repository.count_profiles(baby.id)
                candidate = profile_identifier(baby.id, existing)
                if use_highest or candidate == collided:
                    # The count did not move, so the taken id outlived a delete.
                    use_highest = True
                    candidate = profile_identifier(
                        baby.id, self._highest_sequence(baby.id)
                    )
            except StoreError as exc:
                raise convert_store_error(exc, "count_profiles") from exc
            now = self.clock()
            profile = Profile(
                id=candidate,
                baby_id=baby.id,
                user_id=session.user_id,
                answers=cleaned,
                created_at=now,
                created_by=actor,
                updated_at=now,
                updated_by=actor,
            )
            try:
                self.repository.create_profile(profile)
            except StoreError as exc:
                if not exc.is_unique_violation:
                    raise convert_store_error(exc, "create_profile") from exc
                logger.info(
                    "Profile id already taken, recounting",
                    extra={"profile_id": profile.id, "attempt": attempt},
                )
                collided = profile.id
                continue
            return profile
        raise TransientAllocationConflict(
            "Another profile was saved for this baby at the same time. "
            "Please submit again."
        )

    def _highest_sequence(self, baby_id: str) -> int:
        sequences = (
            profile_sequence(baby_id, profile_id)
            for profile_id in self.repository.list_profile_ids(baby_id)
        )
        return max((value for value in sequences if value is not None), default=0)

    def update_profile(self, profile_id: str, answers: ProfileAnswers) -> Profile:
        """Replace the answers of one of the caller's profiles."""
        session = self.session_manager.require_session()
        cleaned = validate_answers(answers)
        try:
            updated = self.repository.update_profile(
                user_id=session.user_id,
                profile_id=profile_id,
                answers=cleaned,
                updated_at=self.clock(),
                updated_by=actor_name(session),
            )
        except StoreError as exc:
            raise convert_store_error(exc, "update_profile") from exc
        if updated is None:
            raise RecordNotFound(f"Profile {profile_id} was not found.")
        return updated

    def delete_profile(self, profile_id: str, confirmed: bool = False) -> None:
        """Delete a profile once the caller has confirmed."""
        session = self.session_manager.require_session()
        if not confirmed:
            raise ConfirmationRequired("Confirm to delete this profile.")
        try:
            deleted = self.repository.delete_profile(session.user_id, profile_id)
        except StoreError as exc:
            raise convert_store_error(exc, "delete_profile") from exc
        if not deleted:
            raise RecordNotFound(f"Profile {profile_id} was not found.")

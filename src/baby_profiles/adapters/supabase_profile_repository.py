"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from baby_profiles.adapters.supabase_queries import execute, parse_timestamp
from baby_profiles.domain.models import Profile, ProfileAnswers
from baby_profiles.services.profiles import ProfileRepository

_COLUMNS = (
    "id, baby_id, user_id, profile_data, created_at, created_by, "
    "updated_at, updated_by"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def count_profiles(self, baby_id: str) -> int:
        """Return the exact number of profile rows for a baby."""
        response = execute(
            self.client.table("profiles")
            .select("id", count="exact", head=True)
            .eq("baby_id", baby_id)
        )
        return response.count or 0

    def list_profile_ids(self, baby_id: str) -> list[str]:
        """Return the identifiers of every profile of a baby."""
        response = execute(
            self.client.table("profiles").select("id").eq("baby_id", baby_id)
        )
        return [str(row["id"]) for row in response.data or []]

    def create_profile(self, profile: Profile) -> None:
        """Insert a profile row; a taken id fails with a unique violation."""
        execute(
            self.client.table("profiles").insert(
                {
                    "id": profile.id,
                    "baby_id": profile.baby_id,
                    "user_id": profile.user_id,
                    "profile_data": profile.answers,
                    "created_at": _isoformat(profile.created_at),
                    "created_by": profile.created_by,
                    "updated_at": _isoformat(profile.updated_at),
                    "updated_by": profile.updated_by,
                }
            )
        )

    def list_profiles(self, user_id: str, baby_id: str) -> list[Profile]:
        """Return the owner's profiles for a baby, newest first."""
        response = execute(
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("baby_id", baby_id)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [_to_profile(row) for row in response.data or []]

    def get_profile(self, user_id: str, profile_id: str) -> Profile | None:
        """Return one of the owner's profiles, if present."""
        response = execute(
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("id", profile_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        if not response.data:
            return None
        return _to_profile(response.data[0])

    def update_profile(
        self,
        user_id: str,
        profile_id: str,
        answers: ProfileAnswers,
        updated_at: datetime,
        updated_by: str,
    ) -> Profile | None:
        """Replace a profile's answers and return the stored row."""
        response = execute(
            self.client.table("profiles")
            .update(
                {
                    "profile_data": answers,
                    "updated_at": updated_at.isoformat(),
                    "updated_by": updated_by,
                }
            )
            .eq("id", profile_id)
            .eq("user_id", user_id)
        )
        if not response.data:
            return None
        return _to_profile(response.data[0])

    def delete_profile(self, user_id: str, profile_id: str) -> bool:
        """Delete one of the owner's profiles."""
        response = execute(
            self.client.table("profiles")
            .delete()
            .eq("id", profile_id)
            .eq("user_id", user_id)
        )
        return bool(response.data)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _to_profile(row: dict[str, object]) -> Profile:
    answers = row.get("profile_data")
    return Profile(
        id=str(row["id"]),
        baby_id=str(row["baby_id"]),
        user_id=str(row["user_id"]),
        answers=dict(answers) if isinstance(answers, dict) else {},
        created_at=parse_timestamp(row.get("created_at")),
        created_by=row.get("created_by"),
        updated_at=parse_timestamp(row.get("updated_at")),
        updated_by=row.get("updated_by"),
    )

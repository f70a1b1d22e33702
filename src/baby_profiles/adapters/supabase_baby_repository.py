"""Supabase-backed baby repository."""

from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from baby_profiles.adapters.supabase_queries import execute, parse_timestamp
from baby_profiles.domain.models import Baby, BabyChoice
from baby_profiles.services.babies import BabyRepository

_COLUMNS = (
    "id, user_id, name, dob, note, created_at, created_by, updated_at, updated_by"
)


@dataclass
class SupabaseBabyRepository(BabyRepository):
    """Supabase implementation for the babies table."""

    client: Client

    def list_babies(self, user_id: str) -> list[Baby]:
        """Return the owner's babies, newest first."""
        response = execute(
            self.client.table("babies")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [_to_baby(row) for row in response.data or []]

    def list_choices(self, user_id: str) -> list[BabyChoice]:
        """Return id and name of the owner's babies, ordered by name."""
        response = execute(
            self.client.table("babies")
            .select("id, name")
            .eq("user_id", user_id)
            .order("name")
        )
        return [
            BabyChoice(id=row["id"], name=row["name"]) for row in response.data or []
        ]

    def get_baby(self, user_id: str, baby_id: str) -> Baby | None:
        """Return one of the owner's babies, if present."""
        response = execute(
            self.client.table("babies")
            .select(_COLUMNS)
            .eq("id", baby_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        if not response.data:
            return None
        return _to_baby(response.data[0])

    def create_baby(self, baby: Baby) -> None:
        """Insert a baby row; a taken id fails with a unique violation."""
        execute(
            self.client.table("babies").insert(
                {
                    "id": baby.id,
                    "user_id": baby.user_id,
                    "name": baby.name,
                    "dob": baby.dob.isoformat(),
                    "note": baby.note,
                    "created_at": _isoformat(baby.created_at),
                    "created_by": baby.created_by,
                    "updated_at": _isoformat(baby.updated_at),
                    "updated_by": baby.updated_by,
                }
            )
        )

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
        """Update one of the owner's babies and return the stored row."""
        response = execute(
            self.client.table("babies")
            .update(
                {
                    "name": name,
                    "dob": dob.isoformat(),
                    "note": note,
                    "updated_at": updated_at.isoformat(),
                    "updated_by": updated_by,
                }
            )
            .eq("id", baby_id)
            .eq("user_id", user_id)
        )
        if not response.data:
            return None
        return _to_baby(response.data[0])

    def delete_baby(self, user_id: str, baby_id: str) -> bool:
        """Delete one of the owner's babies."""
        response = execute(
            self.client.table("babies")
            .delete()
            .eq("id", baby_id)
            .eq("user_id", user_id)
        )
        return bool(response.data)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _to_baby(row: dict[str, object]) -> Baby:
    return Baby(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row["name"]),
        dob=date.fromisoformat(str(row["dob"])),
        note=str(row.get("note") or ""),
        created_at=parse_timestamp(row.get("created_at")),
        created_by=row.get("created_by"),
        updated_at=parse_timestamp(row.get("updated_at")),
        updated_by=row.get("updated_by"),
    )

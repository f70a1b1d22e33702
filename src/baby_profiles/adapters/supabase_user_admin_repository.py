"""Supabase procedures for account administration."""

import json
from dataclasses import dataclass

from supabase import Client

from baby_profiles.adapters.supabase_queries import execute, parse_timestamp
from baby_profiles.domain.models import DEFAULT_ROLE, UserAccount
from baby_profiles.services.user_admin import UserAdminRepository

LIST_USERS_PROCEDURE = "get_all_users_for_admin"
UPDATE_ROLE_PROCEDURE = "update_user_role_by_admin"
DELETE_USER_PROCEDURE = "delete_user_by_admin"


@dataclass
class SupabaseUserAdminRepository(UserAdminRepository):
    """Admin operations dispatched as RPCs; the functions check the role."""

    client: Client

    def list_users(self) -> list[UserAccount]:
        """Return every auth account."""
        response = execute(self.client.rpc(LIST_USERS_PROCEDURE, {}))
        return [_to_account(row) for row in response.data or []]

    def update_role(self, user_id: str, role: str) -> None:
        """Set the role claim stored in the account's app metadata."""
        execute(
            self.client.rpc(
                UPDATE_ROLE_PROCEDURE, {"user_id": user_id, "new_role": role}
            )
        )

    def delete_user(self, user_id: str) -> None:
        """Delete an auth account."""
        execute(self.client.rpc(DELETE_USER_PROCEDURE, {"user_id": user_id}))


def _to_account(row: dict[str, object]) -> UserAccount:
    metadata = row.get("app_metadata")
    if isinstance(metadata, str):
        metadata = json.loads(metadata) if metadata else {}
    if not isinstance(metadata, dict):
        metadata = {}
    return UserAccount(
        id=str(row["id"]),
        email=row.get("email"),
        role=metadata.get("role") or DEFAULT_ROLE,
        created_at=parse_timestamp(row.get("created_at")),
        last_sign_in_at=parse_timestamp(row.get("last_sign_in_at")),
    )

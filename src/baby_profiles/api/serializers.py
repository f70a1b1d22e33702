"""JSON shapes for domain records."""

from datetime import datetime

from baby_profiles.domain.models import Baby, BabyChoice, Profile, UserAccount


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_baby(baby: Baby) -> dict[str, object]:
    return {
        "id": baby.id,
        "name": baby.name,
        "dob": baby.dob.isoformat(),
        "note": baby.note,
        "created_at": _iso(baby.created_at),
        "created_by": baby.created_by,
        "updated_at": _iso(baby.updated_at),
        "updated_by": baby.updated_by,
    }


def serialize_choice(choice: BabyChoice) -> dict[str, object]:
    return {"id": choice.id, "name": choice.name}


def serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "id": profile.id,
        "baby_id": profile.baby_id,
        "answers": profile.answers,
        "created_at": _iso(profile.created_at),
        "created_by": profile.created_by,
        "updated_at": _iso(profile.updated_at),
        "updated_by": profile.updated_by,
    }


def serialize_account(account: UserAccount) -> dict[str, object]:
    return {
        "id": account.id,
        "email": account.email,
        "role": account.role,
        "created_at": _iso(account.created_at),
        "last_sign_in_at": _iso(account.last_sign_in_at),
    }

"""Deterministic identifiers for babies and profiles.

Babies are keyed by ``<name>_<YYYYMMDD>`` and profiles by
``<baby_id>_<sequence>`` so that identifiers stay readable in exports and
printed reports. Neither key is namespaced by owner.
"""

import re
from datetime import date

from baby_profiles.domain.errors import ValidationFailed

_NON_DIGITS = re.compile(r"\D")


def normalize_name(name: str) -> str:
    """Trim surrounding whitespace; case and inner spacing are kept."""
    return name.strip()


def dob_digits(dob: date | str) -> str:
    """Return an ISO calendar date with every separator removed."""
    if isinstance(dob, date):
        iso_value = dob.isoformat()
    else:
        iso_value = dob.strip()
        try:
            date.fromisoformat(iso_value)
        except ValueError as exc:
            raise ValidationFailed(f"Invalid date of birth: {dob!r}") from exc
    return _NON_DIGITS.sub("", iso_value)


def baby_identifier(name: str, dob: date | str) -> str:
    """Derive the primary key for a baby from its name and date of birth."""
    normalized = normalize_name(name)
    if not normalized:
        raise ValidationFailed("Baby name is required.")
    return f"{normalized}_{dob_digits(dob)}"


def profile_identifier(baby_id: str, existing_count: int) -> str:
    """Derive the next profile key from the number of existing profiles."""
    if existing_count < 0:
        raise ValueError("existing_count must not be negative")
    return f"{baby_id}_{existing_count + 1}"


def profile_sequence(baby_id: str, profile_id: str) -> int | None:
    """Return the numeric suffix of a profile key, or None for foreign keys."""
    prefix = f"{baby_id}_"
    if not profile_id.startswith(prefix):
        return None
    suffix = profile_id[len(prefix) :]
    return int(suffix) if suffix.isdigit() else None

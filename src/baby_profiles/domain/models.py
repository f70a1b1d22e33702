"""Domain models for babies, profiles and accounts."""

from dataclasses import dataclass, field
from datetime import date, datetime

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"
ROLES = frozenset({ADMIN_ROLE, DEFAULT_ROLE})

ProfileAnswers = dict[str, int | float | str]


@dataclass(frozen=True)
class Session:
    """Cached view of the authenticated principal."""

    user_id: str
    email: str | None
    role: str = DEFAULT_ROLE
    access_token: str | None = None
    expires_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        """Return True when the role claim grants admin access."""
        return self.role == ADMIN_ROLE


@dataclass(frozen=True)
class Baby:
    """Represents a baby owned by one account."""

    id: str
    user_id: str
    name: str
    dob: date
    note: str
    created_at: datetime | None
    created_by: str | None
    updated_at: datetime | None
    updated_by: str | None


@dataclass(frozen=True)
class BabyChoice:
    """Minimal baby view used when picking a subject for a profile."""

    id: str
    name: str


@dataclass(frozen=True)
class Profile:
    """Assessment profile attached to a baby."""

    id: str
    baby_id: str
    user_id: str
    answers: ProfileAnswers = field(default_factory=dict)
    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


@dataclass(frozen=True)
class UserAccount:
    """Admin view of an auth account."""

    id: str
    email: str | None
    role: str
    created_at: datetime | None
    last_sign_in_at: datetime | None

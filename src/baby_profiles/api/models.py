"""Request bodies accepted by the HTTP API."""

from datetime import date

from pydantic import BaseModel


class LoginForm(BaseModel):
    """Email and password sign-in."""

    email: str
    password: str


class BabyForm(BaseModel):
    """Fields editable on a baby."""

    name: str
    dob: date
    note: str = ""


class ProfileForm(BaseModel):
    """Questionnaire answers keyed by question."""

    answers: dict[str, int | float | str]


class RoleForm(BaseModel):
    """New role for an account."""

    role: str

"""Tests for route access decisions."""

import pytest

from baby_profiles.domain.models import Session
from baby_profiles.services.access import (
    ADMIN_ONLY,
    AUTHENTICATED,
    LANDING_ROUTE,
    LOGIN_ROUTE,
    AccessGuard,
)
from tests.conftest import ADMIN_SESSION, USER_SESSION


@pytest.mark.parametrize("requirement", [AUTHENTICATED, ADMIN_ONLY])
def test_no_session_redirects_to_login(requirement) -> None:
    decision = AccessGuard().decide(None, requirement)

    assert decision.redirect_to == LOGIN_ROUTE


def test_non_admin_on_admin_route_goes_to_dashboard() -> None:
    decision = AccessGuard().decide(USER_SESSION, ADMIN_ONLY)

    assert not decision.allowed
    assert decision.redirect_to == LANDING_ROUTE


def test_admin_on_admin_route_is_allowed() -> None:
    assert AccessGuard().decide(ADMIN_SESSION, ADMIN_ONLY).allowed


def test_authenticated_route_allows_any_role() -> None:
    guard = AccessGuard()

    assert guard.decide(USER_SESSION, AUTHENTICATED).allowed
    assert guard.decide(ADMIN_SESSION, AUTHENTICATED).allowed


def test_unknown_role_is_not_admin() -> None:
    session = Session(user_id="u", email=None, role="Admin")

    assert AccessGuard().decide(session, ADMIN_ONLY).redirect_to == LANDING_ROUTE

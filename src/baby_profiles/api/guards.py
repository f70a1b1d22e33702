"""Route guard dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from baby_profiles.api.errors import RouteRedirect
from baby_profiles.domain.models import Session  # noqa: TC001
from baby_profiles.services.access import ADMIN_ONLY, AUTHENTICATED, RouteRequirement

if TYPE_CHECKING:
    from baby_profiles.containers import AppContainer, CallerServices


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def get_caller(request: Request) -> CallerServices:
    """Return the services bound to this request's caller."""
    return request.state.caller


def _evaluate(request: Request, requirement: RouteRequirement) -> Session:
    container = get_container(request)
    session = get_caller(request).session_manager.current_session()
    decision = container.access_guard.decide(session, requirement)
    if not decision.allowed:
        raise RouteRedirect(decision.redirect_to)
    return session


def require_session(request: Request) -> Session:
    """Allow any authenticated caller."""
    return _evaluate(request, AUTHENTICATED)


def require_admin(request: Request) -> Session:
    """Allow only callers whose role claim is admin."""
    return _evaluate(request, ADMIN_ONLY)

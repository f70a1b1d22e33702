"""Route access decisions."""

from dataclasses import dataclass

from baby_profiles.domain.models import Session

LOGIN_ROUTE = "/login"
LANDING_ROUTE = "/dashboard"
AUTH_CALLBACK_ROUTE = "/auth-callback"
ADMIN_ROUTE = "/system-management"


@dataclass(frozen=True)
class RouteRequirement:
    """What a protected route demands of the caller."""

    requires_auth: bool = True
    requires_admin: bool = False


AUTHENTICATED = RouteRequirement()
ADMIN_ONLY = RouteRequirement(requires_admin=True)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a guard evaluation; ``redirect_to`` is None when allowed."""

    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        """Return True when the request may proceed."""
        return self.redirect_to is None


ALLOW = AccessDecision()


class AccessGuard:
    """Stateless allow/redirect decision for protected routes.

    Role checks here only shape navigation. Privileged operations are
    authorized again by the store's procedures.
    """

    def decide(
        self, session: Session | None, requirement: RouteRequirement
    ) -> AccessDecision:
        """Return whether the session may open a route with the requirement."""
        if session is None:
            if requirement.requires_auth or requirement.requires_admin:
                return AccessDecision(redirect_to=LOGIN_ROUTE)
            return ALLOW
        if requirement.requires_admin and not session.is_admin:
            return AccessDecision(redirect_to=LANDING_ROUTE)
        return ALLOW

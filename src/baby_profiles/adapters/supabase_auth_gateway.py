"""Supabase auth adapter."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import AuthError, Client

from baby_profiles.adapters.supabase_queries import auth_store_error
from baby_profiles.domain.models import DEFAULT_ROLE, Session
from baby_profiles.services.sessions import AuthGateway, SessionListener


def to_session(raw: object | None) -> Session | None:
    """Build a domain session from a supabase-py session object."""
    if raw is None:
        return None
    user = getattr(raw, "user", None)
    if user is None:
        return None
    app_metadata = getattr(user, "app_metadata", None) or {}
    expires_at = getattr(raw, "expires_at", None)
    return Session(
        user_id=str(user.id),
        email=getattr(user, "email", None),
        role=app_metadata.get("role") or DEFAULT_ROLE,
        access_token=getattr(raw, "access_token", None),
        expires_at=(
            datetime.fromtimestamp(expires_at, tz=UTC)
            if isinstance(expires_at, int | float)
            else None
        ),
    )


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway backed by the supabase-py auth client."""

    client: Client

    def get_session(self) -> Session | None:
        """Return the current session, refreshing it if the token expired.

        A session resumed from storage emits no auth event, so its access
        token is bound to the data client here for row-level security.
        """
        try:
            raw = self.client.auth.get_session()
        except AuthError as exc:
            raise auth_store_error(exc) from exc
        session = to_session(raw)
        if session is not None and session.access_token:
            self.client.postgrest.auth(session.access_token)
        return session

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Forward auth state changes as domain sessions."""

        def _listener(event: str, raw_session: object | None) -> None:
            callback(str(event), to_session(raw_session))

        subscription = self.client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    def sign_in_with_password(self, email: str, password: str) -> None:
        """Sign in with email and password."""
        try:
            self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise auth_store_error(exc) from exc

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        """Start the OAuth flow and return the provider authorization URL."""
        try:
            response = self.client.auth.sign_in_with_oauth(
                {"provider": provider, "options": {"redirect_to": redirect_to}}
            )
        except AuthError as exc:
            raise auth_store_error(exc) from exc
        return response.url

    def exchange_code_for_session(self, code: str) -> Session | None:
        """Exchange the PKCE auth code returned to the callback route."""
        try:
            response = self.client.auth.exchange_code_for_session({"auth_code": code})
        except AuthError as exc:
            raise auth_store_error(exc) from exc
        return to_session(response.session)

    def sign_out(self) -> None:
        """Sign out and drop the stored token."""
        try:
            self.client.auth.sign_out()
        except AuthError as exc:
            raise auth_store_error(exc) from exc

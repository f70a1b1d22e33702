"""State machine for the OAuth return leg."""

import logging
from dataclasses import dataclass
from enum import StrEnum

from baby_profiles.domain.errors import RemoteFailure
from baby_profiles.services.access import LANDING_ROUTE, LOGIN_ROUTE
from baby_profiles.services.sessions import SessionManager

logger = logging.getLogger(__name__)

NO_SESSION_MESSAGE = "Authentication failed or cancelled."


class CallbackState(StrEnum):
    """States of a single callback attempt."""

    AWAITING_SESSION = "AWAITING_SESSION"
    AUTHENTICATED = "AUTHENTICATED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class CallbackOutcome:
    """Terminal state of a callback attempt and where to go next."""

    state: CallbackState
    redirect_to: str
    delay_seconds: int = 0
    error: str | None = None


@dataclass
class AuthCallbackFlow:
    """Resolve the session once after the identity provider redirects back.

    AWAITING_SESSION moves to AUTHENTICATED when a session is present, or to
    FAILED on a provider error, a store error or an absent session. FAILED
    leaves for the login route after a fixed delay. Nothing is retried.
    """

    session_manager: SessionManager
    failure_redirect_seconds: int = 3

    def run(
        self, code: str | None = None, provider_error: str | None = None
    ) -> CallbackOutcome:
        """Run one callback attempt and return its terminal outcome."""
        if provider_error:
            return self._fail(provider_error)
        try:
            if code:
                self.session_manager.exchange_code_for_session(code)
            session = self.session_manager.fetch_session()
        except RemoteFailure as exc:
            return self._fail(exc.message)
        if session is None:
            return self._fail(NO_SESSION_MESSAGE)
        logger.info("Auth callback resolved", extra={"user_id": session.user_id})
        return CallbackOutcome(
            state=CallbackState.AUTHENTICATED, redirect_to=LANDING_ROUTE
        )

    def _fail(self, message: str) -> CallbackOutcome:
        logger.warning("Auth callback failed", extra={"reason": message})
        return CallbackOutcome(
            state=CallbackState.FAILED,
            redirect_to=LOGIN_ROUTE,
            delay_seconds=self.failure_redirect_seconds,
            error=message,
        )

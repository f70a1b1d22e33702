"""Authentication session state for one caller."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, TypeVar

from baby_profiles.domain.errors import RemoteFailure, StoreError, Unauthenticated
from baby_profiles.domain.models import Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[str, Session | None], None]
_Result = TypeVar("_Result")


class AuthGateway(Protocol):
    """Interface to the remote auth subsystem."""

    def get_session(self) -> Session | None:
        """Return the current session, resuming a persisted token if any."""

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register a session-change callback and return its unsubscribe hook."""

    def sign_in_with_password(self, email: str, password: str) -> None:
        """Sign in with email and password."""

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        """Start an OAuth sign-in and return the provider URL."""

    def exchange_code_for_session(self, code: str) -> Session | None:
        """Exchange an OAuth auth code for a session."""

    def sign_out(self) -> None:
        """Sign out the current session."""


class SessionState(StrEnum):
    """Lifecycle of the cached session."""

    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    RESOLVED = "RESOLVED"


@dataclass
class SessionManager:
    """Owns the single cached session and keeps it in sync with auth events.

    The cache is only ever replaced as a whole, either by the one-time startup
    fetch or by a session-change event. The most recent event wins; an initial
    fetch that completes after an event has already arrived is discarded.
    """

    gateway: AuthGateway
    _session: Session | None = field(default=None, init=False)
    _state: SessionState = field(default=SessionState.UNINITIALIZED, init=False)
    _events_seen: int = field(default=0, init=False)
    _unsubscribe: Callable[[], None] | None = field(default=None, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @property
    def state(self) -> SessionState:
        """Return the lifecycle state of the cache."""
        return self._state

    def current_session(self) -> Session | None:
        """Return the cached session without contacting the store."""
        return self._session

    def require_session(self) -> Session:
        """Return the cached session or raise Unauthenticated."""
        session = self._session
        if session is None:
            raise Unauthenticated("Sign in to continue.")
        return session

    @property
    def is_authenticated(self) -> bool:
        """Return True when a session is cached."""
        return self._session is not None

    @property
    def role(self) -> str | None:
        """Return the role claim of the cached session, if any."""
        session = self._session
        return session.role if session else None

    @property
    def is_admin(self) -> bool:
        """Return True when the cached session carries the admin role."""
        session = self._session
        return session is not None and session.is_admin

    def initialize(self) -> Session | None:
        """Subscribe to session changes and fetch the existing session once."""
        with self._lock:
            if self._state is not SessionState.UNINITIALIZED:
                return self._session
            self._state = SessionState.LOADING
            events_before = self._events_seen
        self._subscribe()
        try:
            fetched = self.gateway.get_session()
        except StoreError as exc:
            logger.warning("Initial session fetch failed", extra={"code": exc.code})
            fetched = None
        with self._lock:
            if self._events_seen == events_before:
                self._session = fetched
            self._state = SessionState.RESOLVED
            return self._session

    def sign_in_with_password(self, email: str, password: str) -> None:
        """Sign in with email and password."""
        self._call(
            "sign_in_with_password",
            self.gateway.sign_in_with_password,
            email,
            password,
        )

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> str:
        """Start an OAuth sign-in and return the provider URL."""
        return self._call(
            "sign_in_with_oauth",
            self.gateway.sign_in_with_oauth,
            provider,
            redirect_to,
        )

    def exchange_code_for_session(self, code: str) -> Session | None:
        """Exchange an OAuth auth code for a session."""
        return self._call(
            "exchange_code_for_session", self.gateway.exchange_code_for_session, code
        )

    def fetch_session(self) -> Session | None:
        """Ask the store for the current session.

        Used only by the auth-callback flow; everything else reads the cache.
        """
        return self._call("get_session", self.gateway.get_session)

    def sign_out(self) -> None:
        """Sign out; the cache is cleared by the resulting change event."""
        self._call("sign_out", self.gateway.sign_out)

    def close(self) -> None:
        """Drop the session-change subscription."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _subscribe(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.gateway.on_session_change(self._on_change)

    def _on_change(self, event: str, session: Session | None) -> None:
        with self._lock:
            self._session = session
            self._events_seen += 1
            if self._state is SessionState.UNINITIALIZED:
                self._state = SessionState.RESOLVED
        logger.info(
            "Session changed",
            extra={"event": event, "user_id": session.user_id if session else None},
        )

    def _call(
        self, action: str, func: Callable[..., _Result], *args: object
    ) -> _Result:
        try:
            return func(*args)
        except StoreError as exc:
            logger.warning(
                "Auth call failed", extra={"action": action, "code": exc.code}
            )
            raise RemoteFailure(exc.message) from exc

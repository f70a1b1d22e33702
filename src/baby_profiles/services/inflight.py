"""Duplicate-submission guard for pending actions."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from baby_profiles.domain.errors import ActionInProgress

ActionKey = tuple[str, str, str]


@dataclass
class InFlightGuard:
    """Reject a second invocation of an action while the first is pending."""

    _pending: set[ActionKey] = field(default_factory=set, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @contextmanager
    def hold(self, user_id: str, action: str, target: str = "") -> Iterator[None]:
        """Mark an action as pending for the duration of the block."""
        key = (user_id, action, target)
        with self._lock:
            if key in self._pending:
                raise ActionInProgress("This action is already in progress.")
            self._pending.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._pending.discard(key)

    def is_pending(self, user_id: str, action: str, target: str = "") -> bool:
        """Return True while the action is held."""
        with self._lock:
            return (user_id, action, target) in self._pending

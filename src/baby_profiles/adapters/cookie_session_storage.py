"""Per-caller token storage for the Supabase auth client, carried in a cookie."""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class CookieSessionStorage:
    """Key-value storage the Supabase auth client reads and writes.

    Each request gets its own instance seeded from the caller's cookie, so the
    tokens and the PKCE code verifier of one browser never reach another.
    ``changed`` tells the HTTP layer whether the cookie must be rewritten.
    """

    items: dict[str, str] = field(default_factory=dict)
    changed: bool = False

    @classmethod
    def from_cookie_value(cls, value: str | None) -> "CookieSessionStorage":
        """Decode a cookie value; anything unreadable starts an empty storage."""
        if not value:
            return cls()
        try:
            padded = value + "=" * (-len(value) % 4)
            decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (ValueError, binascii.Error):
            logger.warning("Ignoring unreadable auth cookie")
            return cls(changed=True)
        if not isinstance(decoded, dict):
            return cls(changed=True)
        items = {str(key): str(item) for key, item in decoded.items()}
        return cls(items=items)

    def to_cookie_value(self) -> str:
        """Encode the stored items as unpadded base64url, safe in a cookie."""
        if not self.items:
            return ""
        raw = json.dumps(self.items, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.items.get(key) != value:
            self.items[key] = value
            self.changed = True

    def remove_item(self, key: str) -> None:
        if self.items.pop(key, None) is not None:
            self.changed = True

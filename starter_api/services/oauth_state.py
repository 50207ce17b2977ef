"""
OAuth state store - one-time CSRF tokens for the Google login redirect.

The state value sent to Google must come back unchanged on the callback.
Each value is valid for STATE_TTL_MINUTES and can be consumed once.

In-memory storage: fine for a single process. With several workers, move
this to Redis or the database.
"""

import secrets
from datetime import datetime, timedelta, timezone


class OAuthStateStore:
    STATE_TTL_MINUTES = 10

    def __init__(self, ttl_minutes: int = STATE_TTL_MINUTES):
        self.ttl = timedelta(minutes=ttl_minutes)
        # state -> expires_at
        self._states: dict[str, datetime] = {}

    def issue(self) -> str:
        """Generate, store and return a new state value."""
        self._purge_expired()
        state = secrets.token_urlsafe(32)
        self._states[state] = datetime.now(timezone.utc) + self.ttl
        return state

    def consume(self, state: str) -> bool:
        """Return True if the state was issued and unexpired. Always removes it."""
        expires_at = self._states.pop(state, None)
        if expires_at is None:
            return False
        return datetime.now(timezone.utc) <= expires_at

    def _purge_expired(self) -> None:
        now = datetime.now(timezone.utc)
        for state in [s for s, exp in self._states.items() if exp < now]:
            del self._states[state]

    def __len__(self) -> int:
        return len(self._states)

import secrets
from collections.abc import MutableMapping
from typing import Any, Optional

TOKEN_SESSION_KEY = "token"


def generate_form_token() -> str:
    """Generate a 64-character hex anti-forgery token."""
    return secrets.token_hex(32)


class SessionContext:
    """Narrow get/set access to the per-visitor session store."""

    def __init__(self, store: MutableMapping[str, Any]):
        self._store = store

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._store[key] = value


def verify_session_token(session: SessionContext, submitted: Optional[str]) -> bool:
    """Check a submitted form token against the session's token."""
    expected = session.get(TOKEN_SESSION_KEY)
    if not expected or not submitted:
        return False
    return secrets.compare_digest(str(submitted), str(expected))


def ensure_session_token(session: SessionContext) -> str:
    """Return the session's token, creating it on first use."""
    token = session.get(TOKEN_SESSION_KEY)
    if not token:
        token = generate_form_token()
        session.set(TOKEN_SESSION_KEY, token)
    return token

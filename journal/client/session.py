"""Client-side session handling for the journal API.

Keeps the bearer token in one of two storage scopes: a durable file store
when the user asked to be remembered, an in-memory store otherwise (picking
one clears the other). One expiry job at a time is kept on an APScheduler
scheduler. It fires at the token's ``exp`` claim, wipes both stores and calls
``on_expired`` so the caller can send the user back to sign-in.

Tokens are decoded without signature verification, only to read ``exp``. A
token that cannot be decoded or has no ``exp`` is an error for the caller,
never a session that lasts forever.
"""

import json
import logging
import math
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from jose import jwt
from jose.exceptions import JOSEError

from journal.config import settings

logger = logging.getLogger(__name__)

JWT_STORAGE_KEY = "access_token"
REMEMBER_ME_KEY = "remember_me"
EXPIRY_JOB_ID = "session-expiry"

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


class SessionError(Exception):
    """The session could not be established."""


class TokenDecodeError(SessionError):
    """The token is malformed or carries no usable ``exp`` claim."""


def decode_token(token: str) -> dict[str, Any]:
    """Return the token's claims. No signature check is performed."""
    if not isinstance(token, str) or not token:
        raise TokenDecodeError("Token is empty")
    if token.count(".") != 2:
        raise TokenDecodeError("Token must have three dot-separated segments")
    try:
        return jwt.get_unverified_claims(token)
    except JOSEError as e:
        raise TokenDecodeError(f"Invalid token: {e}") from e


def token_expiry(token: str) -> datetime:
    """UTC expiry time taken from the ``exp`` claim."""
    exp = decode_token(token).get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise TokenDecodeError("Token has no numeric exp claim")
    try:
        if not math.isfinite(exp):
            raise ValueError("exp is not finite")
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TokenDecodeError(f"Token exp claim out of range: {exp}") from e


def strip_bearer(raw: str) -> str:
    return _BEARER_PREFIX.sub("", raw.strip())


def token_from_login_response(body: dict) -> str:
    """Pull the access token out of a login/signup response body."""
    for container in (body.get("data") or {}, body):
        if not isinstance(container, dict):
            continue
        raw = container.get("access_token") or container.get("token")
        if raw:
            return strip_bearer(raw)
    raise SessionError("Access token not found in response")


class MemoryTokenStore:
    """Session-scoped storage; lives as long as the process."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class FileTokenStore:
    """Durable storage backed by a small JSON file."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else settings.session_dir / "session.json"

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def _write(self, data: dict[str, Any]) -> None:
        if not data:
            self.path.unlink(missing_ok=True)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
        self.path.chmod(0o600)

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        data.pop(key, None)
        self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionManager:
    """Owns the stored token, the Authorization header and the single expiry job."""

    def __init__(
        self,
        durable: FileTokenStore | MemoryTokenStore | None = None,
        ephemeral: MemoryTokenStore | None = None,
        scheduler: BackgroundScheduler | None = None,
        on_expired: Callable[[], None] | None = None,
    ):
        self.durable = durable if durable is not None else FileTokenStore()
        self.ephemeral = ephemeral if ephemeral is not None else MemoryTokenStore()
        self.on_expired = on_expired
        self.headers: dict[str, str] = {}
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._lock = threading.RLock()

    @property
    def scheduler(self) -> BackgroundScheduler:
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone=timezone.utc)
        if not self._scheduler.running:
            self._scheduler.start()
        return self._scheduler

    @property
    def token(self) -> str | None:
        return self.durable.get(JWT_STORAGE_KEY) or self.ephemeral.get(JWT_STORAGE_KEY)

    def set_session(
        self,
        token: str | None,
        remember_me: bool = False,
        now: datetime | None = None,
    ) -> None:
        """Store ``token`` and (re)arm the expiry job; ``None`` signs out."""
        if token is None:
            self.clear_session()
            return

        expires_at = token_expiry(token)
        current = now or datetime.now(timezone.utc)

        with self._lock:
            if expires_at <= current:
                self._cancel_expiry()
                self._clear_storage()
                raise SessionError(f"Token already expired at {expires_at.isoformat()}")

            if remember_me:
                self.durable.set(JWT_STORAGE_KEY, token)
                self.durable.set(REMEMBER_ME_KEY, True)
                self.ephemeral.remove(JWT_STORAGE_KEY)
            else:
                self.ephemeral.set(JWT_STORAGE_KEY, token)
                self.durable.remove(JWT_STORAGE_KEY)
                self.durable.remove(REMEMBER_ME_KEY)

            self.headers["Authorization"] = f"Bearer {token}"
            self.scheduler.add_job(
                self._expire,
                trigger=DateTrigger(run_date=expires_at),
                id=EXPIRY_JOB_ID,
                name="Session expiry",
                replace_existing=True,
                misfire_grace_time=None,
            )
        logger.info(f"Session set (remember_me={remember_me}), expires at {expires_at.isoformat()}")

    def clear_session(self) -> None:
        """Sign out: wipe both stores and cancel the pending expiry. Idempotent."""
        with self._lock:
            self._cancel_expiry()
            self._clear_storage()
        logger.info("Session cleared")

    def restore_session(self, now: datetime | None = None) -> str | None:
        """Re-arm a previously stored token, e.g. on start-up.

        Expired tokens are cleared and ``None`` is returned; malformed ones are
        cleared and ``TokenDecodeError`` is raised.
        """
        token = self.token
        if not token:
            return None
        remember_me = bool(self.durable.get(REMEMBER_ME_KEY))

        try:
            expires_at = token_expiry(token)
        except TokenDecodeError:
            self.clear_session()
            raise

        if expires_at <= (now or datetime.now(timezone.utc)):
            logger.info("Stored session has expired")
            self.clear_session()
            return None

        self.set_session(token, remember_me=remember_me, now=now)
        return token

    def pending_expiry(self) -> datetime | None:
        """Run time of the pending expiry job, if any."""
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(EXPIRY_JOB_ID)
        return job.next_run_time if job else None

    def close(self) -> None:
        """Cancel the pending expiry and stop the scheduler if this manager started it.

        Stored tokens are kept so the session can be restored later.
        """
        with self._lock:
            self._cancel_expiry()
            if self._owns_scheduler and self._scheduler is not None:
                if self._scheduler.running:
                    self._scheduler.shutdown(wait=False)
                self._scheduler = None

    def _cancel_expiry(self) -> None:
        if self._scheduler is None:
            return
        try:
            self._scheduler.remove_job(EXPIRY_JOB_ID)
        except JobLookupError:
            pass  # never armed, already fired or already cancelled

    def _clear_storage(self) -> None:
        self.ephemeral.remove(JWT_STORAGE_KEY)
        self.durable.remove(JWT_STORAGE_KEY)
        self.durable.remove(REMEMBER_ME_KEY)
        self.headers.pop("Authorization", None)

    def _expire(self) -> None:
        with self._lock:
            self._clear_storage()
        logger.warning("Session token expired; signed out")
        if self.on_expired is not None:
            self.on_expired()

"""Session lifecycle: restore, login, logout, expiry and invalidation."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import Any

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from pharmacy_app.api.client import PharmacyApiClient
from pharmacy_app.api.errors import SESSION_EXPIRED_MESSAGE, InvalidCredentialsOrServer
from pharmacy_app.config import EXPIRY_CHECK_INTERVAL_MS, SESSION_TTL_MS
from pharmacy_app.models import LoginResult, Session, User
from pharmacy_app.services.notifier import Notifier
from pharmacy_app.services.session_store import (
    AUTH_STORAGE_KEYS,
    ISSUED_AT_KEY,
    TOKEN_KEY,
    USER_KEY,
    PersistentStore,
    cleanup_invalid_storage,
    clear_auth_storage,
)
from pharmacy_app.workers import BackgroundRunner

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Login successful!"
LOGOUT_MESSAGE = "Logged out successfully"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


def epoch_ms() -> int:
    return int(time.time() * 1000)


def is_timestamp_expired(raw: Any, now_ms: int, ttl_ms: int = SESSION_TTL_MS) -> bool:
    """True when ``raw`` is missing, malformed, or older than ``ttl_ms``."""
    if raw is None or isinstance(raw, bool):
        return True
    try:
        issued_at = int(str(raw).strip())
    except (TypeError, ValueError):
        return True
    return now_ms - issued_at > ttl_ms


class SessionManager(QObject):
    """Owns the in-memory session and keeps the persisted copy in step.

    All transitions are expected to run on the GUI thread. Login results are
    tagged with a generation number; any logout, invalidation or newer login
    bumps the generation so a late response can never bring a session back.
    """

    state_changed = pyqtSignal(str)
    login_succeeded = pyqtSignal(object)
    login_failed = pyqtSignal(object)
    login_finished = pyqtSignal()
    session_invalidated = pyqtSignal(str)

    def __init__(
        self,
        *,
        store: PersistentStore,
        client: PharmacyApiClient,
        runner: BackgroundRunner,
        notifier: Notifier | None = None,
        clock: Callable[[], int] = epoch_ms,
        ttl_ms: int = SESSION_TTL_MS,
        check_interval_ms: int = EXPIRY_CHECK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._client = client
        self._runner = runner
        self._notifier = notifier or Notifier(self)
        self._clock = clock
        self.ttl_ms = ttl_ms
        self._state = SessionState.UNINITIALIZED
        self._session: Session | None = None
        self._generation = 0

        self._expiry_timer = QTimer(self)
        self._expiry_timer.setInterval(check_interval_ms)
        self._expiry_timer.timeout.connect(self.check_expiration)

        self._client.interceptor.set_token_provider(lambda: self.token)
        self._client.interceptor.auth_failed.connect(self.handle_auth_failure)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def expiry_check_active(self) -> bool:
        return self._expiry_timer.isActive()

    def restore(self) -> Session | None:
        """Rebuild the session from storage; blocks until a state is settled."""
        self._set_state(SessionState.RESTORING)
        cleanup_invalid_storage(self._store)

        token = self._store.get(TOKEN_KEY)
        raw_user = self._store.get(USER_KEY)
        issued_at = self._store.get(ISSUED_AT_KEY)
        if not (token and raw_user and issued_at):
            if any(self._store.get_raw(key) is not None for key in AUTH_STORAGE_KEYS):
                logger.info("Clearing incomplete stored session")
            self._drop_session()
            return None

        if is_timestamp_expired(issued_at, self._clock(), self.ttl_ms):
            logger.info("Stored session expired, clearing it")
            self._drop_session()
            return None

        try:
            user = User.from_storage(json.loads(raw_user))
        except ValueError:
            logger.warning("Stored user record is not valid JSON")
            user = None
        if user is None:
            logger.warning("Stored user record is invalid, clearing session")
            self._drop_session()
            return None

        self._session = Session(token=token, user=user, issued_at_ms=int(issued_at.strip()))
        self._enter_authenticated()
        logger.info("Session restored for user %s", user.user_id)
        return self._session

    def login(self, email: str, password: str) -> int:
        """Start a login on the background runner and return its ticket."""
        self._generation += 1
        ticket = self._generation
        logger.info("Login attempt started (ticket %s)", ticket)
        self._runner.run(
            partial(self._client.login, email=email, password=password),
            on_result=partial(self.complete_login, ticket),
            on_error=partial(self.fail_login, ticket),
            on_finished=self.login_finished.emit,
        )
        return ticket

    def complete_login(self, ticket: int, result: LoginResult | dict[str, Any]) -> Session | None:
        if ticket != self._generation:
            logger.info("Discarding stale login response (ticket %s, current %s)", ticket, self._generation)
            return None
        if not isinstance(result, LoginResult):
            try:
                result = LoginResult.from_api(result)
            except InvalidCredentialsOrServer as exc:
                self.fail_login(ticket, exc)
                return None

        session = Session(token=result.token, user=result.user, issued_at_ms=self._clock())
        self._session = session
        self._enter_authenticated()
        self._persist(session)
        logger.info("Login successful for user %s", session.user.user_id)
        self._notifier.success(LOGIN_SUCCESS_MESSAGE)
        self.login_succeeded.emit(session)
        return session

    def fail_login(self, ticket: int, error: Exception) -> None:
        if ticket != self._generation:
            logger.info("Ignoring failure of superseded login (ticket %s)", ticket)
            return
        logger.warning("Login failed: %s", error)
        self._drop_session()
        self.login_failed.emit(error)

    def logout(self) -> None:
        had_session = self._session is not None
        self._generation += 1
        self._drop_session()
        if had_session:
            logger.info("User logged out")
            self._notifier.success(LOGOUT_MESSAGE)

    def invalidate(self, message: str = SESSION_EXPIRED_MESSAGE) -> bool:
        """Drop the session because something outside the user ended it."""
        had_session = self._session is not None
        self._generation += 1
        self._drop_session()
        if had_session:
            logger.info("Session invalidated: %s", message)
            self._notifier.error(message)
            self.session_invalidated.emit(message)
        return had_session

    def handle_auth_failure(self, message: str = "", token: str = "") -> None:
        if token and token != self.token:
            logger.debug("Ignoring auth failure for a token that is no longer current")
            return
        self.invalidate(message or SESSION_EXPIRED_MESSAGE)

    def refresh_token(self) -> None:
        # No refresh endpoint exists; an expiring session has to log in again.
        self.invalidate(SESSION_EXPIRED_MESSAGE)

    def is_expired(self, now: int | None = None) -> bool:
        if self._session is None:
            return True
        current = self._clock() if now is None else now
        return is_timestamp_expired(self._session.issued_at_ms, current, self.ttl_ms)

    def check_expiration(self) -> bool:
        if self._state is not SessionState.AUTHENTICATED:
            self._expiry_timer.stop()
            return False
        if self.is_expired():
            self.invalidate(SESSION_EXPIRED_MESSAGE)
            return True
        return False

    def shutdown(self) -> None:
        self._expiry_timer.stop()

    def _enter_authenticated(self) -> None:
        self._set_state(SessionState.AUTHENTICATED)
        self._expiry_timer.start()

    def _drop_session(self) -> None:
        self._session = None
        self._expiry_timer.stop()
        if not clear_auth_storage(self._store):
            logger.warning("Stored session could not be fully removed")
        self._set_state(SessionState.ANONYMOUS)

    def _persist(self, session: Session) -> None:
        written = [
            self._store.set(TOKEN_KEY, session.token),
            self._store.set(USER_KEY, json.dumps(session.user.to_storage())),
            self._store.set(ISSUED_AT_KEY, str(session.issued_at_ms)),
        ]
        if not all(written):
            logger.warning("Session could not be persisted and will not survive a restart")

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug("Session state %s -> %s", self._state.value, state.value)
        self._state = state
        self.state_changed.emit(state.value)

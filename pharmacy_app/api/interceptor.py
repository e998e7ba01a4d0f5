"""Bearer-token attachment and auth-failure detection for every request."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from pharmacy_app.api.errors import (
    SESSION_EXPIRED_MESSAGE,
    ApiError,
    AuthFailure,
    ConnectivityFailure,
    backend_message,
    describe_error,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], "str | None"]


class AuthInterceptor(QObject):
    """Sits between the API client and the session state.

    ``auth_failed(message, token)`` fires for auth-failure signals on requests
    that carried a bearer token; ``connectivity_failed(message)`` fires for
    network errors and timeouts. Emissions from worker threads reach
    GUI-thread receivers through queued connections.
    """

    auth_failed = pyqtSignal(str, str)
    connectivity_failed = pyqtSignal(str)

    def __init__(self, token_provider: TokenProvider | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._token_provider = token_provider

    def set_token_provider(self, token_provider: TokenProvider | None) -> None:
        self._token_provider = token_provider

    def current_token(self) -> str | None:
        if self._token_provider is None:
            return None
        return self._token_provider() or None

    def prepare_headers(self, headers: dict[str, str] | None = None) -> tuple[dict[str, str], str | None]:
        """Return request headers and the bearer token attached to them, if any."""
        prepared = dict(headers or {})
        token = self.current_token()
        if token:
            prepared["Authorization"] = f"Bearer {token}"
        else:
            prepared.pop("Authorization", None)
        return prepared, token

    def inspect_error(self, error: ApiError, *, token: str | None) -> ApiError:
        if isinstance(error, ConnectivityFailure):
            logger.warning("Connectivity failure: %s", error.message)
            self.connectivity_failed.emit(describe_error(error))
        elif isinstance(error, AuthFailure) and token:
            message = backend_message(error) or SESSION_EXPIRED_MESSAGE
            logger.warning(
                "Authentication rejected by backend (status=%s, code=%s)",
                error.status_code,
                error.code,
            )
            self.auth_failed.emit(message, token)
        return error

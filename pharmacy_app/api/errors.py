"""Error taxonomy for the pharmacy API and user-facing error text."""

from __future__ import annotations

from typing import Any

TOKEN_ERROR_CODES: frozenset[str] = frozenset(
    {
        "Invalid token signature",
        "Invalid token format",
        "Token expired",
        "Unsupported token",
        "Invalid token",
    }
)

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class ApiError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        prefix = f"[{self.status_code}] " if self.status_code else ""
        if self.code:
            return f"{prefix}{self.code}: {self.message}"
        return f"{prefix}{self.message}"


class AuthFailure(ApiError):
    """Credential rejected by the backend: 401 or a token error code."""


class InvalidCredentialsOrServer(AuthFailure):
    """Login answered without the fields a session needs."""


class ForbiddenFailure(ApiError):
    pass


class NotFoundFailure(ApiError):
    pass


class ConflictFailure(ApiError):
    pass


class ServerFailure(ApiError):
    pass


class ConnectivityFailure(ApiError):
    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class ValidationFailure(Exception):
    """Bad or missing form input; shown inline next to the form."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


def is_auth_failure_signal(status_code: int | None, code: str | None) -> bool:
    return status_code == 401 or (code is not None and code in TOKEN_ERROR_CODES)


def classify_http_error(status_code: int, payload: Any) -> ApiError:
    """Build the ApiError subclass matching a non-2xx response.

    ``payload`` is the decoded JSON body when there was one, otherwise the raw
    response text (possibly empty).
    """
    message = f"HTTP {status_code}"
    code: str | None = None
    if isinstance(payload, dict):
        raw_code = payload.get("error")
        code = str(raw_code) if raw_code else None
        raw_message = payload.get("message") or payload.get("error")
        if raw_message:
            message = str(raw_message)
    elif isinstance(payload, str) and payload.strip():
        message = payload.strip()[:400]

    if is_auth_failure_signal(status_code, code):
        return AuthFailure(message, status_code=status_code, code=code)
    if status_code == 403:
        return ForbiddenFailure(message, status_code=status_code, code=code)
    if status_code == 404:
        return NotFoundFailure(message, status_code=status_code, code=code)
    if status_code == 409:
        return ConflictFailure(message, status_code=status_code, code=code)
    if status_code >= 500:
        return ServerFailure(message, status_code=status_code, code=code)
    return ApiError(message, status_code=status_code, code=code)


def backend_message(error: ApiError) -> str | None:
    if error.message and error.message != f"HTTP {error.status_code}":
        return error.message
    return None


def describe_error(error: BaseException) -> str:
    """Human-readable notice text for any failure raised by the client."""
    if isinstance(error, ValidationFailure):
        return error.message
    if isinstance(error, ConnectivityFailure):
        if error.timed_out:
            return "Request timed out. Please try again."
        return "Unable to connect to the server. Please check your internet connection."
    if not isinstance(error, ApiError):
        return str(error) or DEFAULT_ERROR_MESSAGE

    if error.code == "Token expired":
        return "Your session has expired. Please login again."
    if error.code in TOKEN_ERROR_CODES:
        return "Session invalid. Please login again."
    if isinstance(error, InvalidCredentialsOrServer):
        return error.message

    status = error.status_code
    detail = backend_message(error)
    if status is None:
        return error.message or DEFAULT_ERROR_MESSAGE
    if status == 400:
        return detail or "Invalid request. Please check your input and try again."
    if status == 401:
        return detail or SESSION_EXPIRED_MESSAGE
    if status == 403:
        return "You do not have permission to perform this action."
    if status == 404:
        return detail or "The requested resource was not found."
    if status == 409:
        return detail or "This action conflicts with existing data. Please refresh and try again."
    if status == 422:
        return "Invalid data provided. Please check all fields and try again."
    if status == 500:
        return "Server error occurred. Please try again later."
    if status in (502, 503, 504):
        return "Service unavailable. Please try again later."
    return detail or f"Request failed with status {status}"

"""Shared fixtures: a Qt application, a temporary store, fake clock and runners."""

import json
import os
from typing import Any
from unittest.mock import Mock

import pytest
import requests

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from pharmacy_app.api.client import PharmacyApiClient  # noqa: E402
from pharmacy_app.api.interceptor import AuthInterceptor  # noqa: E402
from pharmacy_app.services.notifier import Notifier  # noqa: E402
from pharmacy_app.services.session_manager import SessionManager  # noqa: E402
from pharmacy_app.services.session_store import PersistentStore  # noqa: E402

NOW_MS = 1_700_000_000_000

LOGIN_PAYLOAD = {
    "token": "t1",
    "userId": 7,
    "email": "a@x.com",
    "name": "A",
    "role": "CASHIER",
}


class FakeClock:
    def __init__(self, now_ms: int = NOW_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, delta_ms: int) -> None:
        self.now_ms += delta_ms


class ImmediateRunner:
    """Runs the task inline and delivers callbacks before returning."""

    def __init__(self) -> None:
        self.calls = 0

    def run(self, fn, *, on_result=None, on_error=None, on_finished=None) -> None:
        self.calls += 1
        try:
            result = fn()
        except Exception as exc:  # noqa: BLE001
            if on_error is not None:
                on_error(exc)
        else:
            if on_result is not None:
                on_result(result)
        finally:
            if on_finished is not None:
                on_finished()


class DeferredRunner:
    """Holds tasks until the test decides how each one completes."""

    def __init__(self) -> None:
        self.pending: list[dict[str, Any]] = []

    def run(self, fn, *, on_result=None, on_error=None, on_finished=None) -> None:
        self.pending.append(
            {"fn": fn, "on_result": on_result, "on_error": on_error, "on_finished": on_finished}
        )

    def resolve(self, index: int, result: Any) -> None:
        task = self.pending[index]
        if task["on_result"] is not None:
            task["on_result"](result)
        if task["on_finished"] is not None:
            task["on_finished"]()

    def reject(self, index: int, error: Exception) -> None:
        task = self.pending[index]
        if task["on_error"] is not None:
            task["on_error"](error)
        if task["on_finished"] is not None:
            task["on_finished"]()


def make_response(status_code: int, payload: Any = None, *, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if text is not None:
        response._content = text.encode("utf-8")
    elif payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def store(tmp_path) -> PersistentStore:
    return PersistentStore(tmp_path / "storage.json")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def interceptor() -> AuthInterceptor:
    return AuthInterceptor()


@pytest.fixture
def http() -> Mock:
    """Stands in for the client's requests.Session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(interceptor, http) -> PharmacyApiClient:
    api = PharmacyApiClient(base_url="http://pharmacy.test/api", interceptor=interceptor)
    api.session = http
    return api


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def notices(notifier) -> list[tuple[str, str]]:
    posted: list[tuple[str, str]] = []
    notifier.notice_posted.connect(lambda level, text: posted.append((level, text)))
    return posted


@pytest.fixture
def make_manager(store, client, notifier, clock):
    managers: list[SessionManager] = []

    def _make(runner=None, **kwargs) -> SessionManager:
        manager = SessionManager(
            store=store,
            client=client,
            runner=runner or ImmediateRunner(),
            notifier=notifier,
            clock=clock,
            **kwargs,
        )
        managers.append(manager)
        return manager

    yield _make
    for manager in managers:
        manager.shutdown()


def seed_session(store: PersistentStore, *, token="stored-token", user=None, issued_at=NOW_MS) -> None:
    user = user if user is not None else {"userId": 3, "email": "p@x.com", "name": "Pat", "role": "PHARMACIST"}
    store.set("token", token)
    store.set("user", user if isinstance(user, str) else json.dumps(user))
    store.set("tokenTimestamp", str(issued_at))

# tests/conftest.py
from __future__ import annotations

import pytest
import requests

from turbo_dashboard.client import TurboAPI
from turbo_dashboard.controller import DashboardController
from turbo_dashboard.notifier import Notifier
from turbo_dashboard.orders import OrderComposer
from turbo_dashboard.session import SessionManager

BASE_URL = "http://backend.test/api"


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeHTTP:
    """Stands in for requests.Session; routes are keyed by (method, path)."""

    def __init__(self):
        self.headers: dict = {}
        self.calls: list[tuple[str, str, dict | None]] = []
        self.routes: dict = {
            ("GET", "/turbos"): lambda body: (200, {"turbos": []}),
            ("GET", "/turbos/stats"): lambda body: (200, {"totalItems": 0, "lowStockItems": 0, "totalQuantity": 0}),
            ("GET", "/all-pending-orders"): lambda body: (200, {"pendingOrders": []}),
        }

    def route(self, method: str, path: str, status: int = 200, body=None, handler=None) -> None:
        if handler is None:
            self.routes[(method, path)] = lambda _json: (status, body if body is not None else {})
        else:
            self.routes[(method, path)] = handler

    def request(self, method, url, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append((method, path, json))
        handler = self.routes.get((method, path))
        if handler is None:
            return FakeResponse(404, {"message": f"no route {method} {path}"})
        result = handler(json)
        if isinstance(result, Exception):
            raise result
        status, body = result
        return FakeResponse(status, body)

    def paths(self, method: str | None = None) -> list[str]:
        return [p for m, p, _ in self.calls if method is None or m == method]

    def bodies(self, method: str, path: str) -> list:
        return [b for m, p, b in self.calls if m == method and p == path]


def network_down(_json):
    return requests.ConnectionError("connection refused")


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def api(http):
    return TurboAPI(BASE_URL, timeout=5, session=http)


@pytest.fixture
def notifier():
    return Notifier()


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, hours: float) -> None:
        self.now += hours * 3600


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_manager(tmp_path, notifier, clock):
    return SessionManager(tmp_path / "session.json", notifier=notifier, clock=clock)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def controller(api, session_manager, notifier, sleeps):
    return DashboardController(api, session_manager, notifier, refresh_delay=0.5, sleep=sleeps.append)


@pytest.fixture
def composer(api, notifier, clock):
    return OrderComposer(api, notifier, clock=clock)

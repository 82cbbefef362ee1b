"""Shared test fixtures for the SPARKS portal tests."""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from config import get_settings
from notifications import get_mailer
from portal import SparksClient
from storage import get_storage

PARENT = {"X-User-Id": "parent-demo"}
OTHER_PARENT = {"X-User-Id": "parent-2"}
THERAPIST = {"X-User-Id": "therapist-demo"}
OTHER_THERAPIST = {"X-User-Id": "therapist-2"}
MANAGER = {"X-User-Id": "manager-demo"}


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def fresh_storage():
    """Every test starts from freshly seeded demo data and an empty outbox."""
    get_storage.cache_clear()
    get_mailer.cache_clear()
    yield get_storage()
    get_storage.cache_clear()
    get_mailer.cache_clear()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def api(client) -> SparksClient:
    """Anonymous SparksClient talking to the app in-process."""
    return SparksClient(http=client)


@pytest.fixture
def parent_api(api) -> SparksClient:
    return api.as_user("parent-demo")


@pytest.fixture
def therapist_api(api) -> SparksClient:
    return api.as_user("therapist-demo")


@pytest.fixture
def manager_api(api) -> SparksClient:
    return api.as_user("manager-demo")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mailer():
    return get_mailer()

# tests/conftest.py

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.main import create_app
from todo_api.store import TaskStore


class FakeClock:
    """Deterministic clock: every call returns the current value, ``advance`` moves it."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def app_settings() -> Settings:
    return Settings(seed_examples=False, service_name="Todo API")


@pytest.fixture()
def client(store: TaskStore, app_settings: Settings) -> TestClient:
    with TestClient(create_app(store=store, settings=app_settings)) as test_client:
        yield test_client

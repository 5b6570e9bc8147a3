"""
Pytest configuration and shared fixtures.
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from watersurvey.collector.mock import InMemoryCollector
from watersurvey.config import CollectorType, Settings
from watersurvey.survey.store import FormStateStore

COLLECTOR_URL = "https://script.example.com/macros/s/TEST_SCRIPT/exec"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        collector_type=CollectorType.HTTP,
        collector_url=COLLECTOR_URL,
        collector_timeout_seconds=5,
    )


@pytest.fixture
def collector() -> InMemoryCollector:
    mock = InMemoryCollector()
    yield mock
    mock.release()


@pytest.fixture
def store(collector: InMemoryCollector) -> FormStateStore:
    return FormStateStore(collector, session_id="session-test")


@pytest.fixture
def app(collector: InMemoryCollector) -> FastAPI:
    from watersurvey.main import create_app

    return create_app(collector=collector)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


async def fill_to_review(store: FormStateStore) -> None:
    """Drive a store from step 0 to the Review step with valid answers."""
    store.update_field("name", "Avery Johnson")
    store.update_field("email", "avery@email.com")
    for _ in range(3):
        assert await store.advance() is True
    store.update_field("feedback", "Please fix water pressure")
    assert await store.advance() is True
    assert store.wizard.step == 4

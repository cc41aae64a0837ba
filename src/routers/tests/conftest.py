"""Shared fixtures for API tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app

# Cycle history shared with the engine tests
CYCLE_HISTORY = Path(__file__).parents[2] / "cycles" / "tests" / "fixtures" / "cycle_history.json"


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", rate_limit_per_minute=100)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """TestClient with the lifespan running, as under uvicorn."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def cycle_history() -> dict:
    return json.loads(CYCLE_HISTORY.read_text())

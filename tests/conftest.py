"""Shared test fixtures and configuration.

Sets environment variables before any weekly_planner import so the module
level engine is an in-memory SQLite database, and provides a fresh database
per test.
"""

import os

# Patch env vars BEFORE any weekly_planner imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from weekly_planner.db.config import build_engine, get_session
from weekly_planner.db.init import init_db
from weekly_planner.main import app

WEEK = "2024-01-01"


@pytest.fixture
def engine():
    """A fresh in-memory database with all tables."""
    test_engine = build_engine("sqlite://")
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db:
        yield db


@pytest.fixture
def api_app(engine):
    """The FastAPI app wired to the per-test database."""
    def override_session():
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_session] = override_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    return TestClient(api_app, raise_server_exceptions=False)


@pytest.fixture
def asgi_transport(api_app):
    """httpx transport that sends client requests straight into the app."""
    return httpx.ASGITransport(app=api_app)


def task(task_id, text, status="In Process"):
    return {"id": task_id, "text": text, "status": status}

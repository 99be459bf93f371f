"""Shared fixtures: in-memory database, API client and signed-in users."""

import os

os.environ.setdefault("TJ_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import journal.models  # noqa: F401
from journal.database import get_session
from journal.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client: TestClient, email: str = "trader@example.com") -> dict:
    resp = client.post(
        "/api/auth/signup",
        json={
            "email": email,
            "password": "correct-horse",
            "first_name": "Sam",
            "last_name": "Trader",
        },
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth_headers(client) -> dict:
    return signup(client)


@pytest.fixture
def coin(client, auth_headers) -> dict:
    resp = client.post(
        "/api/masters/coins", json={"symbol": "btc", "name": "Bitcoin"}, headers=auth_headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def strategy(client, auth_headers) -> dict:
    resp = client.post(
        "/api/masters/strategies",
        json={"name": "Breakout", "rules": {"timeframe": "4h"}},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()

"""Shared fixtures: an in-memory SQLite database and a TestClient bound to it."""

import os
from datetime import datetime, timedelta

# Must be set before clients_finder.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_FETCH_INTERVAL_HOURS"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clients_finder.core.database import Base, get_db
from clients_finder.main import app
from clients_finder.models import Client, ClientStatus


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(db):
    """Factory for Client rows. Each call is one second newer than the last."""
    base = datetime(2026, 1, 1, 12, 0, 0)
    counter = {"n": 0}

    def _make(**overrides):
        n = counter["n"]
        counter["n"] += 1
        values = {
            "place_id": f"place-{n}",
            "name": f"Business {n}",
            "category": "catering.restaurant",
            "address": f"{n} Main Road, Kathmandu",
            "city": "Kathmandu",
            "latitude": 27.7,
            "longitude": 85.3,
            "status": ClientStatus.PENDING.value,
            "created_at": base + timedelta(seconds=n),
        }
        values.update(overrides)
        client = Client(**values)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    return _make

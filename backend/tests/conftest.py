"""Shared fixtures: a fresh in-memory database for every test."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from agenda.core.config import Settings
from agenda.db.session import create_db_engine, init_db
from agenda.main import create_app


@pytest.fixture()
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def app():
    return create_app(Settings(DATABASE_URL="sqlite://", LOG_LEVEL="DEBUG"))


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client

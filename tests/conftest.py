import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CLIENT_STORAGE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from foodexpress.cart import Cart
from foodexpress.database import create_tables, get_session
from foodexpress.main import app
from foodexpress.session import SessionStore
from foodexpress.storage import MemoryStorage


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(engine)
    return engine


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override():
        with Session(engine) as session:
            yield session
    app.dependency_overrides[get_session] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def cart():
    return Cart()


@pytest.fixture
def session_store():
    return SessionStore(MemoryStorage())


class Navigator:
    def __init__(self):
        self.visited = []

    def __call__(self, url):
        self.visited.append(url)


@pytest.fixture
def navigator():
    return Navigator()

"""Shared fixtures: in-memory database, fake completion client, test app."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.config import Settings
from app.database import init_db
from app.main import create_app
from app.services.chat_service import ChatService
from tests.helpers import FakeOpenAI


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        OPENAI_API_KEY="test-key",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def chat_service(settings, fake_openai):
    return ChatService(settings, client=fake_openai)


@pytest.fixture
def app(settings, engine, chat_service):
    return create_app(settings, engine=engine, chat_service=chat_service)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

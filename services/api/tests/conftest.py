from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database.base import Base
from app.models import (
    AppRole,
    HeartEpisode,
    UserChatUsage,
    UserRole,
    WellnessFaq,
)

# Ensure all models are imported so they're registered with Base.metadata
__all__ = [
    "HeartEpisode",
    "UserChatUsage",
    "UserRole",
    "WellnessFaq",
]


class FakeGateway:
    """Stands in for AIGatewayClient; records calls, returns canned text."""

    def __init__(self):
        self.reply = "Generated answer"
        self.stream_texts = ["Hello", " there"]
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self.stream_calls: list[dict] = []
        self.stream_error: Exception | None = None
        self.streams: list[FakeStream] = []

    async def generate(self, system_prompt: str, message: str) -> str:
        self.calls.append((system_prompt, message))
        if self.error:
            raise self.error
        return self.reply

    async def open_stream(self, system_prompt, messages, max_tokens):
        self.stream_calls.append(
            {"system_prompt": system_prompt, "messages": messages, "max_tokens": max_tokens}
        )
        if self.error:
            raise self.error
        stream = FakeStream(self.stream_texts, self.stream_error)
        self.streams.append(stream)
        return stream


class FakeStream:
    """Async iterable of completion chunks with the close() of an SDK stream."""

    def __init__(self, texts, error: Exception | None = None):
        self.texts = texts
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for text in self.texts:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])
        if self.error:
            raise self.error

    async def close(self):
        self.closed = True


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool to ensure all connections share the same in-memory database.
    Without this, each connection would get a fresh database without tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def session(engine) -> Session:
    """Create a test database session."""
    TestSessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )
    session = TestSessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-00000000-0000-0000-0000-000000000001"


@pytest.fixture
def today() -> date:
    return date(2026, 3, 14)


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def flutter_faq(session: Session) -> WellnessFaq:
    """An active FAQ about flutters after meals."""
    faq = WellnessFaq(
        question="Why do I feel flutters after eating?",
        answer="Flutters after meals are common and often linked to the vagus nerve.",
        keywords=["eating", "flutter", "vagus"],
        is_active=True,
        hit_count=0,
    )
    session.add(faq)
    session.commit()
    session.refresh(faq)
    return faq


@pytest.fixture
def grant_role(session: Session, test_user_id: str):
    """Grant a role to the test user."""

    def _grant(role: AppRole, user_id: str = test_user_id) -> UserRole:
        user_role = UserRole(user_id=user_id, role=role)
        session.add(user_role)
        session.commit()
        return user_role

    return _grant


@pytest.fixture
def client(engine, test_user_id: str, fake_gateway: FakeGateway) -> TestClient:
    """
    Create a FastAPI test client with in-memory database.

    Auth resolves to the test user and the AI gateway is replaced by
    the fake_gateway fixture.
    """
    # Import get_db from the same place routers import it
    from app.database import session as session_module
    from app.main import app
    from app.services.providers import ai_gateway

    TestSessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )

    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session_module.get_db] = override_get_db

    # Mock auth to use test user
    from app.auth import dependencies as auth_deps
    from app.auth.schemas import User

    def override_get_current_user() -> User:
        return User(id=test_user_id, email="test@test.com")

    app.dependency_overrides[auth_deps.get_current_user] = override_get_current_user
    app.dependency_overrides[ai_gateway.get_ai_gateway] = lambda: fake_gateway

    with TestClient(app) as client:
        yield client

    # Clear overrides after test
    app.dependency_overrides.clear()

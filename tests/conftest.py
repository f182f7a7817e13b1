"""
Pytest fixtures for testing
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, JSON
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import JSONB

from chainvault.infrastructure.db.session import Base
from chainvault.auth import hash_password
from chainvault.infrastructure.db.models import User
from chainvault.utils.ids import new_id

USER_PASSWORD = "secret123"


@pytest.fixture
def db_engine():
    """In-memory SQLite engine for tests, with JSONB→JSON mapping.

    StaticPool: одно соединение на все потоки (TestClient гоняет
    sync-эндпоинты в threadpool).
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # SQLite не знает JSONB: подменяем на JSON
    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def make_user(db: Session, username: str = "alice") -> str:
    now = datetime.now(timezone.utc)
    user = User(
        id=new_id(),
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(USER_PASSWORD),
        tier="free",
        preferences={},
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    return user.id


@pytest.fixture
def user_id(db_session) -> str:
    """Existing user (owner for wallets and goals)"""
    return make_user(db_session)


@pytest.fixture
def other_user_id(db_session) -> str:
    return make_user(db_session, "bob")


@pytest.fixture
def client(db_session):
    """Test client для FastAPI с get_db на тестовую сессию"""
    from chainvault.main import app
    from chainvault.api.deps import get_db

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

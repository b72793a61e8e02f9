"""
Pytest fixtures for testing
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from labeltime.infrastructure.db.session import Base
from labeltime.infrastructure.db.models import User, Label


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
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


@pytest.fixture
def sample_user_id():
    """Sample user ID for tests"""
    return 1


@pytest.fixture
def sample_user(db_session, sample_user_id) -> User:
    user = User(id=sample_user_id, email="owner@example.com", timezone="Europe/Moscow")
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture
def make_label(db_session, sample_user):
    """Factory: make_label(label_id, name) -> Label owned by sample_user."""
    def _make(label_id: int, name: str = "Work") -> Label:
        label = Label(id=label_id, user_id=sample_user.id, name=name)
        db_session.add(label)
        db_session.flush()
        return label
    return _make

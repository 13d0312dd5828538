"""
Pytest fixtures for Remedi tests.

Every test gets a fresh in-memory SQLite database. Redis, the scheduler and
rate limiting are switched off through the environment before any project
module reads its settings.
"""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-remedi-tests-0123456789abcdef")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("MAINTENANCE_MODE", "false")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import core.models  # noqa: E402,F401
from core.db import Base, enable_sqlite_foreign_keys  # noqa: E402
from core.security import get_rate_limiter  # noqa: E402

from .factories import make_user  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield db_url, TestingSessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """In-memory rate limit counters are process-wide."""
    get_rate_limiter().reset_all()
    yield
    get_rate_limiter().reset_all()


@pytest.fixture
def user(test_session):
    created = make_user(test_session)
    test_session.commit()
    return created

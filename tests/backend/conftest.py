from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.auth.jwt import create_access_token
from backend.app.main import create_app
from core.db import get_db
from core.models import User

from ..factories import make_subscription, make_user

CSRF_TEST_TOKEN = "csrf_test_token"


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client, TestingSessionLocal


@pytest.fixture
def client(test_app_client) -> TestClient:
    """Browser-like client that echoes the CSRF cookie on every request."""
    test_client, _ = test_app_client
    test_client.cookies.set("csrf_token", CSRF_TEST_TOKEN)
    test_client.headers["X-CSRF-Token"] = CSRF_TEST_TOKEN
    return test_client


@pytest.fixture
def session_factory(test_app_client) -> sessionmaker:
    _, TestingSessionLocal = test_app_client
    return TestingSessionLocal


def create_user(
    session_factory: sessionmaker,
    email: str = "tester@example.com",
    role: str = "user",
    plan: str | None = None,
    status: str = "active",
) -> User:
    session = session_factory()
    try:
        user = make_user(session, email=email, role=role)
        if plan is not None:
            make_subscription(session, user, plan, status=status)
        session.commit()
        return user
    finally:
        session.close()


def auth_headers(user: User) -> dict[str, str]:
    """Bearer auth; exempt from the CSRF check."""
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture
def make_account(session_factory) -> Callable[..., tuple[User, dict[str, str]]]:
    """Create a user (optionally subscribed) and return it with auth headers."""
    counter = iter(range(1, 1000))

    def factory(role: str = "user", plan: str | None = None, status: str = "active"):
        user = create_user(
            session_factory,
            email=f"user{next(counter)}@example.com",
            role=role,
            plan=plan,
            status=status,
        )
        return user, auth_headers(user)

    return factory


@pytest.fixture
def free_account(make_account):
    return make_account()


@pytest.fixture
def basic_account(make_account):
    return make_account(plan="basic")


@pytest.fixture
def premium_account(make_account):
    return make_account(plan="premium")


@pytest.fixture
def moderator_account(make_account):
    return make_account(role="moderator")


@pytest.fixture
def admin_account(make_account):
    return make_account(role="admin")

"""
Pytest fixtures and configuration for Shop API tests

MongoDB is never contacted: repositories and the database module are
patched per test.
"""
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from shop_api.core.auth import create_access_token
from shop_api.core.config import settings
from shop_api.domain.user import User, UserType
from shop_api.main import app

TEST_MASTER_KEY = "test-master-key"


@pytest.fixture
def client():
    """
    Test client without lifespan (no MongoDB connection at startup).

    Server errors come back as 500 responses instead of being re-raised.
    """
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def production(monkeypatch):
    """Run the test with ENVIRONMENT=production"""
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    yield settings


@pytest.fixture
def master_key(monkeypatch):
    monkeypatch.setattr(settings, "MASTER_KEY", TEST_MASTER_KEY)
    return TEST_MASTER_KEY


@pytest.fixture
def make_user():
    """Factory for User domain models"""
    def _make_user(**overrides) -> User:
        data = {
            "id": str(ObjectId()),
            "email": "customer@example.com",
            "name": "Nguyen Van A",
            "user_type": UserType.CUSTOMER,
            "role": None,
            "permissions": [],
            "is_active": True,
            "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return User(**data)
    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def staff(make_user):
    return make_user(
        email="seller@example.com",
        name="Tran Thi B",
        user_type=UserType.STAFF,
        role="seller",
        permissions=["order.view", "order.update"],
    )


@pytest.fixture
def staff_without_role(make_user):
    return make_user(
        email="new.staff@example.com",
        name="Le Van C",
        user_type=UserType.STAFF,
    )


@pytest.fixture
def users(customer, staff, staff_without_role):
    """Patch the repository used by the JWT strategies with these users"""
    known = {user.id: user for user in (customer, staff, staff_without_role)}
    with patch("shop_api.core.auth.UserRepository") as mock_repo_class:
        mock_repo_class.return_value.find_by_id.side_effect = known.get
        yield known


@pytest.fixture
def auth_header():
    """Build an Authorization header for a user"""
    def _auth_header(user: User, **kwargs) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user, **kwargs)}"}
    return _auth_header

"""
tests/conftest.py - Shared Test Fixtures
=========================================
MongoDB is replaced with an in-memory mongomock database for every test;
the real FastAPI app is driven through TestClient.
"""

from __future__ import annotations

from datetime import datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

from alumnisetu.db import mongodb
from alumnisetu.db.mongodb import COLLECTIONS
from alumnisetu.core.auth import create_access_token, hash_password

TEST_PASSWORD = "Password123"


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt is slow; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def db():
    """Fresh in-memory database per test."""
    database = mongomock.MongoClient()["alumnisetu_test"]
    mongodb.set_mongo_db(database)
    yield database
    mongodb.set_mongo_db(None)


@pytest.fixture
def client():
    from alumnisetu.main import app
    return TestClient(app)


@pytest.fixture
def server_client():
    """TestClient that turns unhandled errors into 500 responses."""
    from alumnisetu.main import app
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def make_user(db, password_hash):
    """Insert a user and return (session dict, auth headers)."""

    def _make(name: str = "Test User", role: str = "student", email: str = None):
        email = email or f"{name.lower().replace(' ', '.')}@example.edu"
        doc = {
            "email": email,
            "password": password_hash,
            "name": name,
            "role": role,
            "createdAt": datetime.utcnow(),
            "updatedAt": datetime.utcnow()
        }
        result = db[COLLECTIONS["users"]].insert_one(doc)
        user_id = str(result.inserted_id)
        token = create_access_token({"sub": user_id, "role": role})
        user = {"id": user_id, "email": email, "name": name, "role": role}
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("Ada Admin", role="admin")


@pytest.fixture
def student(make_user):
    return make_user("Sam Student", role="student")


@pytest.fixture
def alumnus(make_user):
    return make_user("Alex Alumni", role="alumni")

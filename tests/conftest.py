"""
Shared fixtures: an in-memory MongoDB (mongomock) swapped in for the real
client, a TestClient for the app, and factories for users/internships.
"""

import os
import tempfile
from datetime import timedelta
from itertools import count

# Settings are cached on first use, so configure before importing the app
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="internhub-uploads-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.auth import hash_password, token_for_user
from app.db import mongodb
from app.schemas.schemas import CurrentUser
from app.services.mongo_service import ApplicationStore, InternshipStore, UserStore
from app.utils.dates import utcnow

PASSWORD = "secret123"
_seq = count(1)


@pytest.fixture
def mongo(monkeypatch):
    client = mongomock.MongoClient()
    monkeypatch.setattr(mongodb, "_client", client)
    monkeypatch.setattr(mongodb, "_db", None)
    monkeypatch.setattr(ApplicationStore, "_unique_index_ready", False)
    mongodb.init_mongo_indexes()
    yield mongodb.get_mongo_db()
    client.close()


@pytest.fixture
def client(mongo):
    from app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow; hash the shared test password once
    return hash_password(PASSWORD)


@pytest.fixture
def make_user(mongo, password_hash):
    def _make(role="student", branch="CSE", name=None, email=None):
        n = next(_seq)
        return UserStore().insert(
            name=name or f"{role.title()} {n}",
            email=email or f"{role}{n}@example.com",
            password_hash=password_hash,
            role=role,
            branch=branch if role == "student" else None,
        )
    return _make


@pytest.fixture
def make_internship(mongo):
    def _make(posted_by=None, **fields):
        data = {
            "title": "Software Intern",
            "company_name": "Acme",
            "description": "Build things",
            "location": "Hyderabad",
            "type": "full-time",
            "salary": "20k/month",
            "cgpa_cutoff": None,
            "deadline": utcnow() + timedelta(days=1),
            "domain": [],
            "skills": [],
            "branch": [],
        }
        data.update(fields)
        return InternshipStore().insert(data, posted_by=posted_by)
    return _make


def auth_header(user_doc: dict) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user_doc)}"}


def as_caller(user_doc: dict) -> CurrentUser:
    return CurrentUser(
        user_id=str(user_doc["_id"]),
        name=user_doc["name"],
        email=user_doc["email"],
        role=user_doc["role"],
        branch=user_doc.get("branch"),
    )

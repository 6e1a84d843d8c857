import os
import tempfile
import uuid
from pathlib import Path

# The engine is built from settings at import time, so point it at a
# throwaway SQLite file before anything from marketplace is imported.
_tmp_dir = Path(tempfile.mkdtemp(prefix="marketplace-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.db'}"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PICKS_FILE"] = str(_tmp_dir / "picks.json")

import mongomock
import pytest
from fastapi.testclient import TestClient

from marketplace.db.database import drop_db, get_db_session, init_db
from marketplace.db.mongodb import set_mongo_client
from marketplace.main import app
from marketplace.services.user_service import create_user

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def fresh_databases():
    """Empty relational schema and in-memory MongoDB for every test."""
    drop_db()
    init_db()
    set_mongo_client(mongomock.MongoClient())
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(client):
    """
    Create an account and log it in.
    Returns {"id", "email", "role", "headers"}; admins are created directly since they cannot sign up.
    """
    def _make(role, name=None, email=None, **profile):
        email = email or f"{role}-{uuid.uuid4().hex[:8]}@marketplace.io"
        name = name or f"{role.title()} User"
        if role == "admin":
            with get_db_session() as db:
                create_user(db, email=email, password=PASSWORD, name=name, role="admin")
        else:
            resp = client.post(
                "/api/auth/register",
                json={"email": email, "password": PASSWORD, "name": name, "role": role, **profile},
            )
            assert resp.status_code == 201, resp.text

        resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        return {
            "id": data["user_id"],
            "email": email,
            "role": role,
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }

    return _make


@pytest.fixture
def make_project(client):
    def _make(owner, **overrides):
        payload = {
            "title": "Build a landing page",
            "description": "Marketing site for a product launch",
            "budget": 1500,
            "deadline": "2030-01-31T00:00:00",
            "category": "Web Development",
            "skills": ["React", "CSS"],
        }
        payload.update(overrides)
        resp = client.post("/api/projects", json=payload, headers=owner["headers"])
        assert resp.status_code == 201, resp.text
        return resp.json()["project"]

    return _make

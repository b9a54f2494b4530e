import mongomock
import pytest
from fastapi.testclient import TestClient

import user_store
from app import app


@pytest.fixture
def collection(monkeypatch):
    users = mongomock.MongoClient()["job_profiles_test"]["users"]
    monkeypatch.setattr(user_store, "_get_collection", lambda: users)
    return users


@pytest.fixture
def client(collection):
    return TestClient(app)


@pytest.fixture
def register(client):
    def _register(username="alice", email="alice@x.com", password="p@ss1234", **extra):
        resp = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password, **extra},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["user"]

    return _register

"""Pytest configuration and fixtures"""
import os
import tempfile
from typing import Callable, Generator

# Must be set before `models` is imported: DBStorage reads it at import time
_DB_DIR = tempfile.mkdtemp(prefix="game-catalog-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")
os.environ["APP_ENV"] = "test"

import pytest
from flask import Flask
from flask.testing import FlaskClient

from api import create_app
from models import storage


@pytest.fixture(scope="function")
def app() -> Generator[Flask, None, None]:
    """Fresh schema and app for each test"""
    storage.drop_all()
    storage.reload()
    app = create_app("test")
    yield app
    storage.drop_all()


@pytest.fixture(scope="function")
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def sample_user_data() -> dict:
    return {"email": "a@x.com", "password": "secret1", "name": "Alice"}


@pytest.fixture
def register(client: FlaskClient) -> Callable[..., dict]:
    """Register a user and return the envelope's data (user + token pair)"""

    def _register(email: str = "a@x.com", password: str = "secret1", name: str | None = "Alice") -> dict:
        response = client.post("/api/v1/auth/register", json={"email": email, "password": password, "name": name})
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _register


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}

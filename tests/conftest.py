"""Shared test fixtures for Roster."""

import json

import pytest
from starlette.testclient import TestClient

from roster.server.app import create_app
from roster.storage import JsonFileStorage
from roster.store import UserStore


@pytest.fixture
def data_file(tmp_path):
    """Path of a data file that does not exist yet."""
    return tmp_path / "users.json"


@pytest.fixture
def seeded_file(tmp_path):
    """Data file holding two users with a gap in their ids."""
    path = tmp_path / "users.json"
    path.write_text(
        json.dumps(
            [
                {"id": 1, "name": "Alice", "age": "30"},
                {"id": 4, "name": "Bob Stone", "age": "41"},
            ]
        )
    )
    return path


@pytest.fixture
def store(data_file):
    """Unloaded store over an empty data file."""
    return UserStore(JsonFileStorage(data_file))


@pytest.fixture
def client(store):
    """Test client with the lifespan running (store loaded)."""
    with TestClient(create_app(store)) as c:
        yield c

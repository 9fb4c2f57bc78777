"""
Shared test fixtures and configuration.
"""

import pytest
import os

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/nova_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("OPENROUTER_API_KEY", "")
os.environ.setdefault("GEMINI_API_KEY", "")

from fastapi.testclient import TestClient

from nova.main import app
from nova.storage import LocalStorage, SessionStore, get_session_store


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def store(storage):
    return SessionStore(storage)


@pytest.fixture
def client(store):
    """TestClient whose chat routes use the per-test store."""
    app.dependency_overrides[get_session_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_body():
    return {
        "title": "T",
        "lastMessage": "hi",
        "time": "10:00",
        "messages": [{"role": "user", "content": "hi", "time": "10:00"}],
        "model": "gemini-2.0-flash",
    }

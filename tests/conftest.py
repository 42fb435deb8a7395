import os

# Must be set before `main` is imported: the app reads settings at import.
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.pop("STATIC_DIR", None)

import pytest
from fastapi.testclient import TestClient

from main import app
from storage import MemStorage, get_storage


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return MemStorage()


@pytest.fixture
def client(store):
    """Test client backed by a fresh in-memory store."""
    app.dependency_overrides[get_storage] = lambda: store
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def valid_payload():
    return {
        "firstName": "Jordan",
        "lastName": "Spieth",
        "email": "jordan@gmail.com",
        "serviceType": "regrip",
        "message": "Need new grips on my irons.",
    }

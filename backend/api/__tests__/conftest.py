"""
Fixtures for REST endpoint tests.

The storage provider and provider session are swapped through FastAPI
dependency overrides; every test gets an empty mock provider and a
preference file under tmp_path.
"""
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_provider
from main import app
from session.context import get_provider_session


@pytest.fixture
def api_client(empty_mock_provider, provider_session):
    """TestClient whose requests are served by empty_mock_provider."""
    app.dependency_overrides[get_provider] = lambda: empty_mock_provider
    app.dependency_overrides[get_provider_session] = lambda: provider_session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def created_job(api_client):
    """A job created through the API (201 response body)."""
    response = api_client.post("/api/jobs", json={
        "company": "Acme",
        "position": "Backend Engineer",
        "applicationDate": "2024-03-01",
        "location": "Berlin",
    })
    assert response.status_code == 201
    return response.json()

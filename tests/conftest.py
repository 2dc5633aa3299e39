# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase singleton for an in-memory fake per test
# - Provides a TestClient and helpers for registering / logging in users
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-token-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-token-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.main import app
from lib.supabase_client import SupabaseClient
from tests.fake_supabase import FakeSupabase


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh in-memory database installed as the Supabase client."""
    fake = FakeSupabase()
    SupabaseClient.set_client(fake)
    yield fake
    SupabaseClient.set_client(None)


@pytest.fixture
def client(db):
    """API client; unexpected errors come back as 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def make_user_payload(**overrides) -> dict:
    payload = {
        "fullName": "Alice Reader",
        "email": "alice@example.com",
        "username": "alice",
        "password": "correct-horse",
    }
    payload.update(overrides)
    return payload


def register(client: TestClient, **overrides):
    return client.post("/api/v1/users/register", json=make_user_payload(**overrides))


def login(client: TestClient, username: str = "alice", password: str = "correct-horse") -> dict:
    """Log in and return the response data (user + both tokens)."""
    response = client.post(
        "/api/v1/users/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client) -> dict:
    """Registered and logged-in user 'alice'."""
    register(client)
    return login(client)


@pytest.fixture
def bob(client) -> dict:
    """Registered and logged-in user 'bob'."""
    register(client, fullName="Bob Critic", email="bob@example.com", username="bob")
    return login(client, "bob")


@pytest.fixture
def book(client, alice) -> dict:
    """A book added by alice."""
    response = client.post(
        "/api/v1/books",
        json={
            "title": "The Left Hand of Darkness",
            "author": "Ursula K. Le Guin",
            "genre": "Science Fiction",
            "description": "An envoy on a planet of ambisexual people.",
        },
        headers=bearer(alice["accessToken"]),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]

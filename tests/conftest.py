"""
Pytest fixtures for the CMS backend tests.

Supabase is replaced by the in-memory fakes in tests/fakes.py; the session gate
is the real one, wired to fake collaborators.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.context import Identity, Profile
from app.core.dependencies import get_actor_supabase, get_session_gate
from app.core.rate_limit import limiter
from app.core.session_gate import SessionGate
from app.database.supabase_client import get_auth_supabase, get_service_supabase, get_supabase
from app.main import create_app
from tests.fakes import (
    TOKENS, FakeCredentialStore, FakeProfileRepository, FakeSupabase, profile_rows,
)


@pytest.fixture(autouse=True)
def disable_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def profiles():
    """Profile per seeded user, keyed by user id."""
    return {row["id"]: Profile(**row) for row in profile_rows()}


@pytest.fixture
def credential_store():
    return FakeCredentialStore({
        token: Identity(id=user_id, email=f"{user_id}@example.com")
        for token, user_id in TOKENS.items()
    })


@pytest.fixture
def profile_repository(profiles):
    return FakeProfileRepository(profiles)


@pytest.fixture
def gate(credential_store, profile_repository):
    return SessionGate(credential_store, profile_repository)


@pytest.fixture
def fake_db():
    return FakeSupabase({"user_profiles": profile_rows()})


@pytest.fixture
def cms_app(gate, fake_db):
    """Application with the gate and every Supabase client swapped for fakes."""
    application = create_app(gate_provider=lambda: gate)
    application.dependency_overrides[get_session_gate] = lambda: gate
    application.dependency_overrides[get_supabase] = lambda: fake_db
    application.dependency_overrides[get_auth_supabase] = lambda: fake_db
    application.dependency_overrides[get_actor_supabase] = lambda: fake_db
    application.dependency_overrides[get_service_supabase] = lambda: fake_db
    return application


@pytest.fixture
def client(cms_app):
    with TestClient(cms_app, follow_redirects=False) as test_client:
        yield test_client


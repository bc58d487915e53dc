"""Unit tests for the Supabase-backed credential store and profile repository."""

import pytest
from fastapi import HTTPException

from app.core.context import Actor, Role
from app.core.errors import InvalidOrExpiredToken, UpstreamUnavailable
from app.modules.auth.schemas import LoginRequest, RegisterRequest
from app.modules.auth.service import AuthService
from app.modules.profiles.schemas import ProfileUpdate
from app.modules.profiles.service import ProfileService
from tests.fakes import ADMIN_ID, EDITOR_ID, VIEWER_ID, FakeSupabase, profile_rows


class TestAuthService:
    @pytest.fixture
    def supabase(self):
        db = FakeSupabase()
        db.auth.add_user("u1", "jane@example.com", password="Secret123", token="good-token")
        return db

    def test_verify_token(self, supabase):
        identity = AuthService(supabase).verify_token("good-token")
        assert identity.id == "u1"
        assert identity.email == "jane@example.com"

    def test_unknown_token(self, supabase):
        with pytest.raises(InvalidOrExpiredToken):
            AuthService(supabase).verify_token("bad-token")

    def test_unexpected_failure_is_upstream(self, supabase):
        supabase.auth.error = ConnectionError("connection reset")
        with pytest.raises(UpstreamUnavailable):
            AuthService(supabase).verify_token("good-token")

    def test_login(self, supabase):
        identity, tokens = AuthService(supabase).login(
            LoginRequest(email="jane@example.com", password="Secret123")
        )
        assert identity.id == "u1"
        assert tokens.access_token and tokens.refresh_token

    def test_login_with_wrong_password(self, supabase):
        with pytest.raises(HTTPException) as exc:
            AuthService(supabase).login(LoginRequest(email="jane@example.com", password="Wrong1234"))
        assert exc.value.status_code == 401

    def test_refresh_rotates_tokens(self, supabase):
        service = AuthService(supabase)
        _, first = service.login(LoginRequest(email="jane@example.com", password="Secret123"))
        identity, second = service.refresh_session(first.refresh_token)
        assert identity.id == "u1"
        assert second.refresh_token != first.refresh_token
        with pytest.raises(InvalidOrExpiredToken):
            service.refresh_session(first.refresh_token)

    def test_register_duplicate(self, supabase):
        with pytest.raises(HTTPException) as exc:
            AuthService(supabase).register(RegisterRequest(email="jane@example.com", password="Secret123"))
        assert exc.value.status_code == 400


class TestProfileService:
    @pytest.fixture
    def db(self):
        return FakeSupabase({"user_profiles": profile_rows()})

    @pytest.fixture
    def service_db(self, db):
        """Service-role client sharing the same tables."""
        privileged = FakeSupabase()
        privileged.tables = db.tables
        return privileged

    def test_get_profile(self, db):
        profile = ProfileService(db).get_profile(EDITOR_ID)
        assert profile.role == Role.EDITOR

    def test_missing_profile_is_none(self, db):
        assert ProfileService(db).get_profile("nobody") is None

    def test_storage_errors_propagate(self, db):
        db.failing_tables.add("user_profiles")
        with pytest.raises(RuntimeError):
            ProfileService(db).get_profile(EDITOR_ID)

    def test_owner_renames_self(self, db):
        viewer = Actor(id=VIEWER_ID, role=Role.VIEWER)
        updated = ProfileService(db).update_profile(viewer, VIEWER_ID, ProfileUpdate(full_name="Valerie"))
        assert updated.full_name == "Valerie"

    def test_self_promotion_is_rejected(self, db, service_db):
        """An editor sending role=admin for their own profile changes nothing."""
        editor = Actor(id=EDITOR_ID, role=Role.EDITOR)
        with pytest.raises(HTTPException) as exc:
            ProfileService(db, service_client=service_db).update_profile(
                editor, EDITOR_ID, ProfileUpdate(role=Role.ADMIN)
            )
        assert exc.value.status_code == 403
        assert db.payloads("update", "user_profiles") == []
        assert service_db.calls == []

    def test_unchanged_privileged_value_is_not_a_change(self, db):
        editor = Actor(id=EDITOR_ID, role=Role.EDITOR)
        result = ProfileService(db).update_profile(
            editor, EDITOR_ID, ProfileUpdate(role=Role.EDITOR, full_name="Eddie E.")
        )
        assert result.full_name == "Eddie E."
        assert db.payloads("update", "user_profiles")[0].keys() == {"full_name", "updated_at"}

    def test_admin_deactivates_through_service_client(self, db, service_db):
        admin = Actor(id=ADMIN_ID, role=Role.ADMIN)
        result = ProfileService(db, service_client=service_db).update_profile(
            admin, EDITOR_ID, ProfileUpdate(is_active=False)
        )
        assert result.is_active is False
        assert db.payloads("update", "user_profiles") == []
        assert service_db.payloads("update", "user_profiles")[0]["is_active"] is False

    def test_privileged_change_without_service_key(self, db):
        admin = Actor(id=ADMIN_ID, role=Role.ADMIN)
        with pytest.raises(HTTPException) as exc:
            ProfileService(db).update_profile(admin, EDITOR_ID, ProfileUpdate(role=Role.VIEWER))
        assert exc.value.status_code == 500

    def test_admin_cannot_rename_others(self, db, service_db):
        admin = Actor(id=ADMIN_ID, role=Role.ADMIN)
        with pytest.raises(HTTPException) as exc:
            ProfileService(db, service_client=service_db).update_profile(
                admin, EDITOR_ID, ProfileUpdate(full_name="Renamed")
            )
        assert exc.value.status_code == 403

    def test_missing_target(self, db):
        admin = Actor(id=ADMIN_ID, role=Role.ADMIN)
        with pytest.raises(HTTPException) as exc:
            ProfileService(db).update_profile(admin, "nobody", ProfileUpdate(is_active=False))
        assert exc.value.status_code == 404

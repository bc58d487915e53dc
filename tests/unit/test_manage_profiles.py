"""Unit tests for the profile maintenance script."""

from app.scripts.manage_profiles import backfill_profiles, build_parser, set_profile_access
from tests.fakes import EDITOR_ID, VIEWER_ID, FakeSupabase, profile_rows


class TestSetProfileAccess:
    def test_promote(self):
        db = FakeSupabase({"user_profiles": profile_rows()})
        assert set_profile_access(db, VIEWER_ID, role="editor") is True
        row = next(r for r in db.tables["user_profiles"] if r["id"] == VIEWER_ID)
        assert row["role"] == "editor"

    def test_deactivate(self):
        db = FakeSupabase({"user_profiles": profile_rows()})
        assert set_profile_access(db, EDITOR_ID, is_active=False) is True
        row = next(r for r in db.tables["user_profiles"] if r["id"] == EDITOR_ID)
        assert row["is_active"] is False

    def test_unknown_user(self):
        assert set_profile_access(FakeSupabase(), "nobody", role="admin") is False


class TestBackfill:
    def test_creates_missing_profiles_as_viewers(self):
        db = FakeSupabase({"user_profiles": [{"id": "u1", "role": "admin", "is_active": True}]})
        db.auth.add_user("u1", "one@example.com")
        db.auth.add_user("u2", "two@example.com")

        assert backfill_profiles(db) == 1
        created = next(r for r in db.tables["user_profiles"] if r["id"] == "u2")
        assert created["role"] == "viewer"
        assert created["is_active"] is True
        assert created["full_name"] == "two"

    def test_nothing_to_do(self):
        db = FakeSupabase({"user_profiles": [{"id": "u1"}]})
        db.auth.add_user("u1", "one@example.com")
        assert backfill_profiles(db) == 0


class TestParser:
    def test_promote_requires_known_role(self):
        args = build_parser().parse_args(["promote", "u1", "editor"])
        assert args.command == "promote"
        assert args.role == "editor"

"""Unit tests for the policy evaluator."""

import pytest

from app.config.permissions_config import ROLE_CAPABILITIES, get_capability_matrix, get_role_capabilities
from app.core.context import ANONYMOUS, Actor, Profile, ResourceRef, Role
from app.core.policy import (
    Action,
    actor_from_profile,
    can_access_admin_routes,
    can_update_profile,
    initial_profile,
    is_allowed,
)

ALL_ROLES = list(Role)
ALL_ACTIONS = list(Action)

PUBLISHED = ResourceRef(created_by="someone-else", is_published=True)
DRAFT = ResourceRef(created_by="someone-else", is_published=False)


def actor(role: Role, actor_id: str = "u1", is_active: bool = True) -> Actor:
    return Actor(id=actor_id, role=role, is_active=is_active)


class TestInactiveActors:
    """An inactive actor is denied everything."""

    @pytest.mark.parametrize("role", ALL_ROLES)
    @pytest.mark.parametrize("action", ALL_ACTIONS)
    @pytest.mark.parametrize("resource", [None, PUBLISHED, DRAFT, ResourceRef(created_by="u1")])
    def test_denied_everything(self, role, action, resource):
        assert is_allowed(actor(role, is_active=False), action, resource) is False

    def test_inactive_owner_cannot_edit_own_profile(self):
        assert can_update_profile(actor(Role.ADMIN, is_active=False), "u1", {"full_name"}) is False


class TestPublishedReads:
    """Published or active content is readable by anyone."""

    def test_anonymous_reads_published(self):
        assert is_allowed(ANONYMOUS, Action.READ, PUBLISHED) is True

    @pytest.mark.parametrize("role", ALL_ROLES)
    def test_every_role_reads_published(self, role):
        assert is_allowed(actor(role), Action.READ, PUBLISHED) is True

    def test_anonymous_cannot_read_draft(self):
        assert is_allowed(ANONYMOUS, Action.READ, DRAFT) is False

    def test_viewer_cannot_read_foreign_draft(self):
        assert is_allowed(actor(Role.VIEWER), Action.READ, DRAFT) is False

    @pytest.mark.parametrize("role", [Role.EDITOR, Role.ADMIN])
    def test_staff_read_drafts(self, role):
        assert is_allowed(actor(role), Action.READ, DRAFT) is True

    def test_owner_reads_own_draft(self):
        own_draft = ResourceRef(created_by="u1", is_published=False)
        assert is_allowed(actor(Role.VIEWER), Action.READ, own_draft) is True


class TestAnonymousWrites:
    @pytest.mark.parametrize("action", [Action.CREATE, Action.UPDATE, Action.DELETE])
    @pytest.mark.parametrize("resource", [None, PUBLISHED, DRAFT])
    def test_anonymous_never_writes(self, action, resource):
        assert is_allowed(ANONYMOUS, action, resource) is False


class TestCreate:
    @pytest.mark.parametrize("role,expected", [
        (Role.ADMIN, True),
        (Role.EDITOR, True),
        (Role.VIEWER, False),
    ])
    def test_create_follows_role(self, role, expected):
        assert is_allowed(actor(role), Action.CREATE) is expected


class TestUpdateAndDelete:
    def test_editor_updates_foreign_content(self):
        assert is_allowed(actor(Role.EDITOR), Action.UPDATE, DRAFT) is True

    def test_editor_cannot_delete_foreign_content(self):
        """An editor trying to delete another editor's post is denied."""
        other_editors_post = ResourceRef(created_by="editor-2", is_published=True)
        assert is_allowed(actor(Role.EDITOR, "editor-1"), Action.DELETE, other_editors_post) is False

    def test_editor_deletes_own_content(self):
        own_post = ResourceRef(created_by="editor-1", is_published=True)
        assert is_allowed(actor(Role.EDITOR, "editor-1"), Action.DELETE, own_post) is True

    def test_admin_deletes_anything(self):
        assert is_allowed(actor(Role.ADMIN), Action.DELETE, DRAFT) is True

    def test_viewer_cannot_update_foreign_content(self):
        assert is_allowed(actor(Role.VIEWER), Action.UPDATE, PUBLISHED) is False

    def test_viewer_owner_may_update_and_delete(self):
        own = ResourceRef(created_by="u1")
        assert is_allowed(actor(Role.VIEWER), Action.UPDATE, own) is True
        assert is_allowed(actor(Role.VIEWER), Action.DELETE, own) is True

    def test_rows_without_creator_have_no_owner(self):
        orphan = ResourceRef(created_by=None)
        assert is_allowed(actor(Role.VIEWER), Action.DELETE, orphan) is False


class TestProfileUpdates:
    """Self-service fields versus privileged fields."""

    def test_owner_changes_own_name(self):
        assert can_update_profile(actor(Role.VIEWER), "u1", {"full_name"}) is True

    @pytest.mark.parametrize("role", [Role.VIEWER, Role.EDITOR])
    @pytest.mark.parametrize("field", ["role", "is_active"])
    def test_non_admin_cannot_change_privileged_fields_of_self(self, role, field):
        assert can_update_profile(actor(role), "u1", {field}) is False

    def test_admin_changes_role_of_others(self):
        assert can_update_profile(actor(Role.ADMIN), "u2", {"role", "is_active"}) is True

    def test_admin_cannot_change_name_of_others(self):
        assert can_update_profile(actor(Role.ADMIN), "u2", {"full_name"}) is False

    def test_mixed_change_needs_both(self):
        assert can_update_profile(actor(Role.ADMIN), "u1", {"full_name", "role"}) is True
        assert can_update_profile(actor(Role.ADMIN), "u2", {"full_name", "role"}) is False

    def test_empty_change(self):
        assert can_update_profile(actor(Role.VIEWER), "u1", set()) is True
        assert can_update_profile(actor(Role.VIEWER), "u2", set()) is False
        assert can_update_profile(actor(Role.ADMIN), "u2", set()) is True

    def test_anonymous_changes_nothing(self):
        assert can_update_profile(ANONYMOUS, "u1", {"full_name"}) is False


class TestAdminRoutes:
    @pytest.mark.parametrize("role,expected", [
        (Role.ADMIN, True),
        (Role.EDITOR, True),
        (Role.VIEWER, False),
    ])
    def test_route_access_by_role(self, role, expected):
        assert can_access_admin_routes(Profile(id="u1", role=role)) is expected

    def test_inactive_profile_is_refused(self):
        assert can_access_admin_routes(Profile(id="u1", role=Role.ADMIN, is_active=False)) is False

    def test_missing_profile_is_refused(self):
        assert can_access_admin_routes(None) is False


class TestActorFromProfile:
    def test_missing_profile_is_anonymous(self):
        assert actor_from_profile(None) is ANONYMOUS

    def test_profile_fields_are_carried(self):
        result = actor_from_profile(Profile(id="u1", role=Role.EDITOR, is_active=False))
        assert result == Actor(id="u1", role=Role.EDITOR, is_active=False)


class TestInitialProfile:
    def test_new_identity_is_active_viewer(self):
        row = initial_profile("u1", "jane@example.com")
        assert row["role"] == "viewer"
        assert row["is_active"] is True
        assert row["full_name"] == "jane"

    def test_explicit_name_is_kept(self):
        assert initial_profile("u1", "jane@example.com", "Jane Doe")["full_name"] == "Jane Doe"


class TestCapabilityMatrix:
    def test_every_role_has_capabilities(self):
        assert set(ROLE_CAPABILITIES) == set(Role)

    def test_only_admin_manages_profiles(self):
        roles = get_capability_matrix()["roles"]
        holders = [entry["name"] for entry in roles if "profiles:manage" in entry["capabilities"]]
        assert holders == ["admin"]

    def test_viewer_has_no_capabilities(self):
        assert get_role_capabilities(Role.VIEWER) == []

    def test_editor_capabilities_are_per_resource(self):
        capabilities = get_role_capabilities(Role.EDITOR)
        assert "posts:create" in capabilities
        assert "posts:delete" not in capabilities

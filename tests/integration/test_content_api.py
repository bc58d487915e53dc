"""Integration tests for the auth, profile and content endpoints."""

import pytest

from tests.fakes import ADMIN_ID, EDITOR_ID, OTHER_EDITOR_ID, VIEWER_ID, sign_in


@pytest.fixture
def seeded(fake_db):
    fake_db.tables["posts"] = [
        {"id": "p1", "title": "Hello", "slug": "hello", "content": "Body", "published": True,
         "published_at": "2024-05-01T10:00:00+00:00", "created_by": OTHER_EDITOR_ID},
        {"id": "p2", "title": "Draft", "slug": "draft", "content": "Body", "published": False,
         "created_by": OTHER_EDITOR_ID},
    ]
    fake_db.tables["page_content_sections"] = [
        {"id": "s1", "page_type": "homepage", "page_id": "home", "section_type": "faq_accordion",
         "content_data": {"items": []}, "sort_order": 0, "is_active": True, "created_by": EDITOR_ID},
    ]
    return fake_db


class TestPublicApi:
    def test_only_published_posts(self, client, seeded):
        response = client.get("/api/v1/posts")
        assert response.status_code == 200
        assert [post["slug"] for post in response.json()] == ["hello"]

    def test_draft_by_slug_is_404(self, client, seeded):
        assert client.get("/api/v1/posts/draft").status_code == 404
        assert client.get("/api/v1/posts/hello").json()["id"] == "p1"

    def test_page_sections(self, client, seeded):
        response = client.get("/api/v1/pages/homepage/home/sections")
        assert response.status_code == 200
        assert response.json()[0]["section_type"] == "faq_accordion"

    def test_unknown_page_type_is_rejected(self, client):
        assert client.get("/api/v1/pages/nowhere/home/sections").status_code == 422

    def test_login_page_echoes_error(self, client):
        assert client.get("/login?error=inactive").json()["error"] == "inactive"


class TestCmsApi:
    def test_editor_creates_post(self, client, seeded):
        response = sign_in(client, "editor-token").post(
            "/cms-admin/api/posts",
            json={"title": "New", "slug": "new", "content": "Body", "created_by": "someone-else"},
        )
        assert response.status_code == 201
        assert response.json()["created_by"] == EDITOR_ID

    def test_editor_sees_drafts(self, client, seeded):
        response = sign_in(client, "editor-token").get("/cms-admin/api/posts")
        assert {post["id"] for post in response.json()} == {"p1", "p2"}

    def test_editor_cannot_delete_foreign_post(self, client, seeded):
        response = sign_in(client, "editor-token").delete("/cms-admin/api/posts/p1")
        assert response.status_code == 403
        assert len(seeded.tables["posts"]) == 2

    def test_admin_deletes_any_post(self, client, seeded):
        response = sign_in(client, "admin-token").delete("/cms-admin/api/posts/p1")
        assert response.status_code == 204
        assert [row["id"] for row in seeded.tables["posts"]] == ["p2"]

    def test_seo_upsert(self, client):
        sign_in(client, "editor-token")
        body = {"page_type": "blog_post", "page_id": "p1", "intro_text": "Intro"}
        first = client.put("/cms-admin/api/seo", json=body)
        second = client.put("/cms-admin/api/seo", json={**body, "intro_text": "Changed"})
        assert first.status_code == second.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert client.get("/api/v1/pages/blog_post/p1/seo").json()["intro_text"] == "Changed"

    def test_section_update_keeps_creator(self, client, seeded):
        response = sign_in(client, "other-editor-token").put(
            "/cms-admin/api/sections/s1", json={"title": "FAQ", "created_by": OTHER_EDITOR_ID}
        )
        assert response.status_code == 200
        assert response.json()["created_by"] == EDITOR_ID
        assert response.json()["updated_by"] == OTHER_EDITOR_ID


class TestAuthApi:
    def test_me_requires_session(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_for_viewer(self, client):
        response = sign_in(client, "viewer-token").get("/api/v1/auth/me")
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == VIEWER_ID
        assert body["profile"]["role"] == "viewer"
        assert body["capabilities"] == []

    def test_inactive_user_is_anonymous_on_public_api(self, client):
        assert sign_in(client, "inactive-token").get("/api/v1/auth/me").status_code == 401

    def test_login_sets_http_only_cookies(self, client, fake_db):
        fake_db.auth.add_user("u-new", "new@example.com", password="Secret123")
        response = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "Secret123"})
        assert response.status_code == 200
        assert response.json()["user_id"] == "u-new"
        set_cookies = response.headers.get_list("set-cookie")
        for name in ("sb-access-token", "sb-refresh-token"):
            header = next(h for h in set_cookies if h.startswith(f"{name}="))
            assert "HttpOnly" in header
            assert "Max-Age=604800" in header

    def test_rejected_refresh_clears_cookies(self, client):
        client.cookies.set("sb-refresh-token", "stale")
        response = client.post("/api/v1/auth/refresh")
        assert response.status_code == 401
        cleared = [h for h in response.headers.get_list("set-cookie") if "Max-Age=0" in h]
        assert len(cleared) == 2

    def test_refresh_without_cookie(self, client):
        assert client.post("/api/v1/auth/refresh").status_code == 401

    def test_refresh_issues_new_session(self, client, fake_db):
        fake_db.auth.add_user("u-new", "new@example.com", password="Secret123")
        client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "Secret123"})
        response = client.post("/api/v1/auth/refresh")
        assert response.status_code == 200
        assert response.json()["user_id"] == "u-new"

    def test_logout_clears_cookies(self, client, fake_db):
        """Only the caller's own session is revoked."""
        response = sign_in(client, "editor-token").post("/api/v1/auth/logout")
        assert response.status_code == 200
        cleared = [h for h in response.headers.get_list("set-cookie") if "Max-Age=0" in h]
        assert len(cleared) == 2
        assert fake_db.auth.revoked == ["editor-token"]

    def test_logout_without_session(self, client, fake_db):
        assert client.post("/api/v1/auth/logout").status_code == 200
        assert fake_db.auth.revoked == []


class TestProfilesApi:
    def test_self_promotion_is_forbidden(self, client, fake_db):
        """An editor asking for role=admin on their own profile is refused and nothing is written."""
        response = sign_in(client, "editor-token").put("/api/v1/profiles/me", json={"role": "admin"})
        assert response.status_code == 403
        assert fake_db.payloads("update", "user_profiles") == []

    def test_self_rename(self, client):
        response = sign_in(client, "viewer-token").put("/api/v1/profiles/me", json={"full_name": "Valerie"})
        assert response.status_code == 200
        assert response.json()["full_name"] == "Valerie"

    def test_admin_deactivates_editor(self, client, fake_db):
        response = sign_in(client, "admin-token").put(
            f"/admin/api/profiles/{EDITOR_ID}", json={"is_active": False}
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_editor_cannot_change_roles(self, client):
        response = sign_in(client, "editor-token").put(
            f"/admin/api/profiles/{VIEWER_ID}", json={"role": "editor"}
        )
        assert response.status_code == 403

    def test_admin_lists_profiles(self, client):
        response = sign_in(client, "admin-token").get("/admin/api/profiles?limit=50")
        assert response.status_code == 200
        assert ADMIN_ID in {profile["id"] for profile in response.json()}

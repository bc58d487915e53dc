import logging
from datetime import datetime, timezone
from supabase import Client
from fastapi import HTTPException
from typing import Dict, List, Optional

from app.core.context import ANONYMOUS, Actor
from app.core.ownership import ensure_allowed, fetch_resource, resource_ref_from_row, stamp_created, stamp_updated
from app.core.policy import Action, is_allowed
from app.modules.posts.schemas import (
    AuthorResponse, CategoryCreate, CategoryResponse, TagCreate, TagResponse,
    PostCreate, PostUpdate, PostResponse,
)

logger = logging.getLogger(__name__)

PUBLISHED_COLUMN = "published"


class PostService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Public reads

    def list_published(
        self,
        category_slug: Optional[str] = None,
        tag_slug: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[PostResponse]:
        """Published posts, newest first, optionally filtered by category or tag slug."""
        try:
            query = self.supabase.table("posts").select("*").eq(PUBLISHED_COLUMN, True)
            if category_slug:
                category = self._find_by_slug("categories", category_slug)
                if not category:
                    return []
                query = query.eq("category_id", category["id"])
            if tag_slug:
                tag = self._find_by_slug("tags", tag_slug)
                if not tag:
                    return []
                links = self.supabase.table("post_tags").select("post_id").eq("tag_id", tag["id"]).execute()
                post_ids = [r["post_id"] for r in (links.data or [])]
                if not post_ids:
                    return []
                query = query.in_("id", post_ids)
            result = query.order("published_at", desc=True).limit(limit).offset(offset).execute()
            rows = [r for r in result.data if is_allowed(ANONYMOUS, Action.READ, resource_ref_from_row(r, PUBLISHED_COLUMN))]
            return self._with_tags(rows)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_published_by_slug(self, slug: str) -> PostResponse:
        try:
            result = self.supabase.table("posts").select("*").eq("slug", slug).maybe_single().execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        row = result.data if result is not None else None
        if not row or not is_allowed(ANONYMOUS, Action.READ, resource_ref_from_row(row, PUBLISHED_COLUMN)):
            raise HTTPException(status_code=404, detail="Post not found")
        return self._with_tags([row])[0]

    def list_authors(self) -> List[AuthorResponse]:
        try:
            result = self.supabase.table("authors").select("*").order("name").execute()
            return [AuthorResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_categories(self) -> List[CategoryResponse]:
        try:
            result = self.supabase.table("categories").select("*").order("name").execute()
            return [CategoryResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_tags(self) -> List[TagResponse]:
        try:
            result = self.supabase.table("tags").select("*").order("name").execute()
            return [TagResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # CMS

    def list_posts(self, actor: Actor, limit: int = 20, offset: int = 0) -> List[PostResponse]:
        """All posts the actor may see, drafts included."""
        try:
            result = self.supabase.table("posts").select("*").order("created_at", desc=True).limit(limit).offset(offset).execute()
            rows = [r for r in result.data if is_allowed(actor, Action.READ, resource_ref_from_row(r, PUBLISHED_COLUMN))]
            return self._with_tags(rows)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_post(self, actor: Actor, post_id: str) -> PostResponse:
        row, ref = fetch_resource(self.supabase, "posts", post_id, PUBLISHED_COLUMN, "Post not found")
        ensure_allowed(actor, Action.READ, ref, "post")
        return self._with_tags([row])[0]

    def create_post(self, actor: Actor, post_data: PostCreate) -> PostResponse:
        ensure_allowed(actor, Action.CREATE, what="post")
        payload = post_data.model_dump(mode="json", exclude={"tag_ids"})
        if payload["published"] and not payload.get("published_at"):
            payload["published_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("posts").insert(stamp_created(payload, actor)).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create post")
            row = result.data[0]
            self._set_tags(row["id"], post_data.tag_ids)
            logger.info(f"Post {row['id']} created by {actor.id}")
            return self._with_tags([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_post(self, actor: Actor, post_id: str, post_data: PostUpdate) -> PostResponse:
        current, ref = fetch_resource(self.supabase, "posts", post_id, PUBLISHED_COLUMN, "Post not found")
        ensure_allowed(actor, Action.UPDATE, ref, "post")

        update_data = post_data.model_dump(mode="json", exclude_none=True, exclude={"tag_ids"})
        if update_data.get("published") and not current.get("published_at") and "published_at" not in update_data:
            update_data["published_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("posts")\
                .update(stamp_updated(update_data, actor))\
                .eq("id", post_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Post not found")
            if post_data.tag_ids is not None:
                self._set_tags(post_id, post_data.tag_ids)
            return self._with_tags([result.data[0]])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_post(self, actor: Actor, post_id: str) -> None:
        _, ref = fetch_resource(self.supabase, "posts", post_id, PUBLISHED_COLUMN, "Post not found")
        ensure_allowed(actor, Action.DELETE, ref, "post")
        try:
            self.supabase.table("posts").delete().eq("id", post_id).execute()
            logger.info(f"Post {post_id} deleted by {actor.id}")
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_category(self, actor: Actor, data: CategoryCreate) -> CategoryResponse:
        ensure_allowed(actor, Action.CREATE, what="category")
        return CategoryResponse(**self._insert_one("categories", data.model_dump(), "category"))

    def create_tag(self, actor: Actor, data: TagCreate) -> TagResponse:
        ensure_allowed(actor, Action.CREATE, what="tag")
        return TagResponse(**self._insert_one("tags", data.model_dump(), "tag"))

    # Helpers

    def _insert_one(self, table: str, payload: dict, what: str) -> dict:
        try:
            result = self.supabase.table(table).insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=f"Failed to create {what}")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            if "unique" in str(e).lower() or "duplicate" in str(e).lower():
                raise HTTPException(status_code=400, detail=f"A {what} with this slug already exists")
            raise HTTPException(status_code=500, detail=str(e))

    def _find_by_slug(self, table: str, slug: str) -> Optional[dict]:
        result = self.supabase.table(table).select("id").eq("slug", slug).maybe_single().execute()
        if result is None:
            return None
        return result.data

    def _set_tags(self, post_id: str, tag_ids: List[str]) -> None:
        self.supabase.table("post_tags").delete().eq("post_id", post_id).execute()
        if tag_ids:
            self.supabase.table("post_tags").insert(
                [{"post_id": post_id, "tag_id": tag_id} for tag_id in dict.fromkeys(tag_ids)]
            ).execute()

    def _with_tags(self, rows: List[dict]) -> List[PostResponse]:
        if not rows:
            return []
        post_ids = [r["id"] for r in rows]
        links = self.supabase.table("post_tags").select("post_id, tag_id").in_("post_id", post_ids).execute()
        tags_by_post: Dict[str, List[str]] = {}
        for link in links.data or []:
            tags_by_post.setdefault(link["post_id"], []).append(link["tag_id"])
        return [PostResponse(**row, tag_ids=tags_by_post.get(row["id"], [])) for row in rows]

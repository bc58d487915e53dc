import logging
from supabase import Client
from fastapi import HTTPException
from typing import List

from app.core.context import Actor
from app.core.ownership import ensure_allowed, fetch_resource, resource_ref_from_row, stamp_created, stamp_updated
from app.core.policy import Action
from app.modules.sections.schemas import PageType
from app.modules.seo.schemas import SeoContentUpsert, SeoContentResponse

logger = logging.getLogger(__name__)

TABLE = "page_seo_content"


class SeoContentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_page_seo(self, page_type: PageType, page_id: str) -> SeoContentResponse:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("page_type", page_type.value)\
                .eq("page_id", page_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching SEO content: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if result is None or not result.data:
            raise HTTPException(status_code=404, detail="SEO content not found")
        return SeoContentResponse(**result.data)

    def list_seo(self, limit: int = 50, offset: int = 0) -> List[SeoContentResponse]:
        try:
            result = self.supabase.table(TABLE).select("*").order("page_type").limit(limit).offset(offset).execute()
            return [SeoContentResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def upsert_page_seo(self, actor: Actor, seo_data: SeoContentUpsert) -> SeoContentResponse:
        """Create the SEO block of a page, or update it when one exists (unique on page_type, page_id)."""
        payload = seo_data.model_dump(mode="json")
        try:
            existing = self.supabase.table(TABLE)\
                .select("*")\
                .eq("page_type", payload["page_type"])\
                .eq("page_id", payload["page_id"])\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        row = existing.data if existing is not None else None
        try:
            if row:
                ensure_allowed(actor, Action.UPDATE, resource_ref_from_row(row, None), "SEO content")
                result = self.supabase.table(TABLE)\
                    .update(stamp_updated(payload, actor))\
                    .eq("id", row["id"])\
                    .execute()
            else:
                ensure_allowed(actor, Action.CREATE, what="SEO content")
                result = self.supabase.table(TABLE).insert(stamp_created(payload, actor)).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save SEO content")
            return SeoContentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error upserting SEO content: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_seo(self, actor: Actor, seo_id: str) -> None:
        _, ref = fetch_resource(self.supabase, TABLE, seo_id, None, "SEO content not found")
        ensure_allowed(actor, Action.DELETE, ref, "SEO content")
        try:
            self.supabase.table(TABLE).delete().eq("id", seo_id).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

import logging
from supabase import Client
from fastapi import HTTPException
from typing import List, Optional

from app.core.context import ANONYMOUS, Actor
from app.core.ownership import ensure_allowed, fetch_resource, resource_ref_from_row, stamp_created, stamp_updated
from app.core.policy import Action, is_allowed
from app.modules.sections.schemas import PageType, SectionCreate, SectionUpdate, SectionResponse

logger = logging.getLogger(__name__)

TABLE = "page_content_sections"
PUBLISHED_COLUMN = "is_active"


class SectionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_page_sections(self, page_type: PageType, page_id: str) -> List[SectionResponse]:
        """Active sections of a page in display order (public)."""
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("page_type", page_type.value)\
                .eq("page_id", page_id)\
                .eq(PUBLISHED_COLUMN, True)\
                .order("sort_order")\
                .execute()
            return [
                SectionResponse(**row) for row in result.data
                if is_allowed(ANONYMOUS, Action.READ, resource_ref_from_row(row, PUBLISHED_COLUMN))
            ]
        except Exception as e:
            logger.error(f"Error fetching content sections: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_sections(
        self,
        actor: Actor,
        page_type: Optional[PageType] = None,
        page_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SectionResponse]:
        """Sections the actor may see, inactive ones included (CMS)."""
        try:
            query = self.supabase.table(TABLE).select("*")
            if page_type:
                query = query.eq("page_type", page_type.value)
            if page_id:
                query = query.eq("page_id", page_id)
            result = query.order("sort_order").limit(limit).offset(offset).execute()
            return [
                SectionResponse(**row) for row in result.data
                if is_allowed(actor, Action.READ, resource_ref_from_row(row, PUBLISHED_COLUMN))
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_section(self, actor: Actor, section_id: str) -> SectionResponse:
        row, ref = fetch_resource(self.supabase, TABLE, section_id, PUBLISHED_COLUMN, "Section not found")
        ensure_allowed(actor, Action.READ, ref, "section")
        return SectionResponse(**row)

    def create_section(self, actor: Actor, section_data: SectionCreate) -> SectionResponse:
        ensure_allowed(actor, Action.CREATE, what="section")
        try:
            result = self.supabase.table(TABLE)\
                .insert(stamp_created(section_data.model_dump(mode="json"), actor))\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create section")
            return SectionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating content section: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_section(self, actor: Actor, section_id: str, section_data: SectionUpdate) -> SectionResponse:
        _, ref = fetch_resource(self.supabase, TABLE, section_id, PUBLISHED_COLUMN, "Section not found")
        ensure_allowed(actor, Action.UPDATE, ref, "section")
        update_data = section_data.model_dump(mode="json", exclude_none=True)
        try:
            result = self.supabase.table(TABLE)\
                .update(stamp_updated(update_data, actor))\
                .eq("id", section_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Section not found")
            return SectionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating content section: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_section(self, actor: Actor, section_id: str) -> None:
        _, ref = fetch_resource(self.supabase, TABLE, section_id, PUBLISHED_COLUMN, "Section not found")
        ensure_allowed(actor, Action.DELETE, ref, "section")
        try:
            self.supabase.table(TABLE).delete().eq("id", section_id).execute()
        except Exception as e:
            logger.error(f"Error deleting content section: {e}")
            raise HTTPException(status_code=500, detail=str(e))

from supabase import Client
from fastapi import HTTPException
from typing import List

from app.core.context import ANONYMOUS, Actor
from app.core.ownership import ensure_allowed, fetch_resource, resource_ref_from_row, stamp_created, stamp_updated
from app.core.policy import Action, is_allowed
from app.modules.content_templates.schemas import (
    ContentTemplateCreate, ContentTemplateUpdate, ContentTemplateResponse,
)

TABLE = "content_templates"
PUBLISHED_COLUMN = "is_public"


class ContentTemplateService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_public(self, limit: int = 20, offset: int = 0) -> List[ContentTemplateResponse]:
        try:
            result = self.supabase.table(TABLE).select("*").eq(PUBLISHED_COLUMN, True)\
                .order("created_at", desc=True).limit(limit).offset(offset).execute()
            return [
                ContentTemplateResponse(**row) for row in result.data
                if is_allowed(ANONYMOUS, Action.READ, resource_ref_from_row(row, PUBLISHED_COLUMN))
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_templates(self, actor: Actor, limit: int = 20, offset: int = 0) -> List[ContentTemplateResponse]:
        """Public templates plus the private ones the actor may read."""
        try:
            result = self.supabase.table(TABLE).select("*").order("created_at", desc=True).limit(limit).offset(offset).execute()
            return [
                ContentTemplateResponse(**row) for row in result.data
                if is_allowed(actor, Action.READ, resource_ref_from_row(row, PUBLISHED_COLUMN))
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_template(self, actor: Actor, template_id: str) -> ContentTemplateResponse:
        row, ref = fetch_resource(self.supabase, TABLE, template_id, PUBLISHED_COLUMN, "Template not found")
        ensure_allowed(actor, Action.READ, ref, "template")
        return ContentTemplateResponse(**row)

    def create_template(self, actor: Actor, template_data: ContentTemplateCreate) -> ContentTemplateResponse:
        ensure_allowed(actor, Action.CREATE, what="template")
        try:
            result = self.supabase.table(TABLE)\
                .insert(stamp_created(template_data.model_dump(mode="json"), actor))\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create template")
            return ContentTemplateResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_template(self, actor: Actor, template_id: str, template_data: ContentTemplateUpdate) -> ContentTemplateResponse:
        _, ref = fetch_resource(self.supabase, TABLE, template_id, PUBLISHED_COLUMN, "Template not found")
        ensure_allowed(actor, Action.UPDATE, ref, "template")
        update_data = template_data.model_dump(mode="json", exclude_none=True)
        try:
            result = self.supabase.table(TABLE)\
                .update(stamp_updated(update_data, actor))\
                .eq("id", template_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Template not found")
            return ContentTemplateResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_template(self, actor: Actor, template_id: str) -> None:
        _, ref = fetch_resource(self.supabase, TABLE, template_id, PUBLISHED_COLUMN, "Template not found")
        ensure_allowed(actor, Action.DELETE, ref, "template")
        try:
            self.supabase.table(TABLE).delete().eq("id", template_id).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

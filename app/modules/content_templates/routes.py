from fastapi import APIRouter, Depends
from app.core.context import ActorContext
from app.core.dependencies import get_actor_supabase, get_current_actor
from app.core.policy import actor_from_profile
from app.database.supabase_client import get_supabase
from app.modules.content_templates.schemas import (
    ContentTemplateCreate, ContentTemplateUpdate, ContentTemplateResponse,
)
from app.modules.content_templates.service import ContentTemplateService
from supabase import Client
from typing import List

router = APIRouter(prefix="/templates", tags=["templates"])

admin_router = APIRouter(prefix="/templates", tags=["templates-admin"])


def get_public_template_service(supabase: Client = Depends(get_supabase)) -> ContentTemplateService:
    return ContentTemplateService(supabase)


def get_template_service(supabase: Client = Depends(get_actor_supabase)) -> ContentTemplateService:
    return ContentTemplateService(supabase)


@router.get("", response_model=List[ContentTemplateResponse])
async def list_public_templates(
    limit: int = 20,
    offset: int = 0,
    service: ContentTemplateService = Depends(get_public_template_service),
):
    """Public section templates."""
    return service.list_public(limit=limit, offset=offset)


@admin_router.get("", response_model=List[ContentTemplateResponse])
async def list_templates(
    limit: int = 20,
    offset: int = 0,
    actor: ActorContext = Depends(get_current_actor),
    service: ContentTemplateService = Depends(get_template_service),
):
    return service.list_templates(actor_from_profile(actor.profile), limit=limit, offset=offset)


@admin_router.post("", response_model=ContentTemplateResponse, status_code=201)
async def create_template(
    template_data: ContentTemplateCreate,
    actor: ActorContext = Depends(get_current_actor),
    service: ContentTemplateService = Depends(get_template_service),
):
    return service.create_template(actor_from_profile(actor.profile), template_data)


@admin_router.get("/{template_id}", response_model=ContentTemplateResponse)
async def get_template(
    template_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: ContentTemplateService = Depends(get_template_service),
):
    return service.get_template(actor_from_profile(actor.profile), template_id)


@admin_router.put("/{template_id}", response_model=ContentTemplateResponse)
async def update_template(
    template_id: str,
    template_data: ContentTemplateUpdate,
    actor: ActorContext = Depends(get_current_actor),
    service: ContentTemplateService = Depends(get_template_service),
):
    return service.update_template(actor_from_profile(actor.profile), template_id, template_data)


@admin_router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: ContentTemplateService = Depends(get_template_service),
):
    service.delete_template(actor_from_profile(actor.profile), template_id)
    return None

from fastapi import APIRouter, Depends
from app.core.context import ActorContext
from app.core.dependencies import get_actor_supabase, get_current_actor
from app.core.policy import actor_from_profile
from app.database.supabase_client import get_supabase
from app.modules.sections.schemas import PageType
from app.modules.seo.schemas import SeoContentUpsert, SeoContentResponse
from app.modules.seo.service import SeoContentService
from supabase import Client
from typing import List

router = APIRouter(prefix="/pages", tags=["seo"])

admin_router = APIRouter(prefix="/seo", tags=["seo-admin"])


def get_public_seo_service(supabase: Client = Depends(get_supabase)) -> SeoContentService:
    return SeoContentService(supabase)


def get_seo_service(supabase: Client = Depends(get_actor_supabase)) -> SeoContentService:
    return SeoContentService(supabase)


@router.get("/{page_type}/{page_id}/seo", response_model=SeoContentResponse)
async def get_page_seo(
    page_type: PageType,
    page_id: str,
    service: SeoContentService = Depends(get_public_seo_service),
):
    return service.get_page_seo(page_type, page_id)


@admin_router.get("", response_model=List[SeoContentResponse])
async def list_seo(
    limit: int = 50,
    offset: int = 0,
    actor: ActorContext = Depends(get_current_actor),
    service: SeoContentService = Depends(get_seo_service),
):
    return service.list_seo(limit=limit, offset=offset)


@admin_router.put("", response_model=SeoContentResponse)
async def upsert_page_seo(
    seo_data: SeoContentUpsert,
    actor: ActorContext = Depends(get_current_actor),
    service: SeoContentService = Depends(get_seo_service),
):
    """Create or replace the SEO block of a page."""
    return service.upsert_page_seo(actor_from_profile(actor.profile), seo_data)


@admin_router.delete("/{seo_id}", status_code=204)
async def delete_seo(
    seo_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: SeoContentService = Depends(get_seo_service),
):
    service.delete_seo(actor_from_profile(actor.profile), seo_id)
    return None

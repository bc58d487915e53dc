from fastapi import APIRouter, Depends
from app.core.context import ActorContext
from app.core.dependencies import get_actor_supabase, get_current_actor
from app.core.policy import actor_from_profile
from app.database.supabase_client import get_supabase
from app.modules.sections.schemas import PageType, SectionCreate, SectionUpdate, SectionResponse
from app.modules.sections.service import SectionService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/pages", tags=["sections"])

admin_router = APIRouter(prefix="/sections", tags=["sections-admin"])


def get_public_section_service(supabase: Client = Depends(get_supabase)) -> SectionService:
    return SectionService(supabase)


def get_section_service(supabase: Client = Depends(get_actor_supabase)) -> SectionService:
    return SectionService(supabase)


@router.get("/{page_type}/{page_id}/sections", response_model=List[SectionResponse])
async def list_page_sections(
    page_type: PageType,
    page_id: str,
    service: SectionService = Depends(get_public_section_service),
):
    """Active content sections of a page, ordered by sort_order."""
    return service.list_page_sections(page_type, page_id)


@admin_router.get("", response_model=List[SectionResponse])
async def list_sections(
    page_type: Optional[PageType] = None,
    page_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    actor: ActorContext = Depends(get_current_actor),
    service: SectionService = Depends(get_section_service),
):
    return service.list_sections(actor_from_profile(actor.profile), page_type, page_id, limit, offset)


@admin_router.post("", response_model=SectionResponse, status_code=201)
async def create_section(
    section_data: SectionCreate,
    actor: ActorContext = Depends(get_current_actor),
    service: SectionService = Depends(get_section_service),
):
    return service.create_section(actor_from_profile(actor.profile), section_data)


@admin_router.get("/{section_id}", response_model=SectionResponse)
async def get_section(
    section_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: SectionService = Depends(get_section_service),
):
    return service.get_section(actor_from_profile(actor.profile), section_id)


@admin_router.put("/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: str,
    section_data: SectionUpdate,
    actor: ActorContext = Depends(get_current_actor),
    service: SectionService = Depends(get_section_service),
):
    return service.update_section(actor_from_profile(actor.profile), section_id, section_data)


@admin_router.delete("/{section_id}", status_code=204)
async def delete_section(
    section_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: SectionService = Depends(get_section_service),
):
    service.delete_section(actor_from_profile(actor.profile), section_id)
    return None

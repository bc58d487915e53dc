from fastapi import APIRouter, Depends
from app.core.context import ActorContext
from app.core.dependencies import get_actor_supabase, get_current_actor
from app.core.policy import actor_from_profile
from app.database.supabase_client import get_service_supabase
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client
from typing import List, Optional

# Self-service, any signed-in role
router = APIRouter(prefix="/profiles", tags=["profiles"])

# Administration, behind the session gate (/admin)
admin_router = APIRouter(prefix="/profiles", tags=["profiles-admin"])


def get_profile_service(
    supabase: Client = Depends(get_actor_supabase),
    service_client: Optional[Client] = Depends(get_service_supabase),
) -> ProfileService:
    return ProfileService(supabase, service_client=service_client)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    actor: ActorContext = Depends(get_current_actor),
):
    """Profile of the signed-in user."""
    return ProfileResponse.model_validate(actor.profile)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    actor: ActorContext = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    """Update own profile. Changing role or is_active is rejected unless the caller is an admin."""
    return service.update_profile(actor_from_profile(actor.profile), actor.identity.id, profile_data)


@admin_router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    limit: int = 10,
    offset: int = 0,
    actor: ActorContext = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    """List profiles (admin UI)."""
    return service.list_profiles(limit=limit, offset=offset)


@admin_router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    """Get profile by ID."""
    return service.get_profile_by_id(profile_id)


@admin_router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    profile_data: ProfileUpdate,
    actor: ActorContext = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    """Update a profile. role / is_active need an admin; other fields only their owner."""
    return service.update_profile(actor_from_profile(actor.profile), profile_id, profile_data)

import logging
from datetime import datetime, timezone
from supabase import Client
from fastapi import HTTPException
from typing import List, Optional

from app.core.context import Actor, Profile
from app.core.policy import PRIVILEGED_PROFILE_FIELDS, can_update_profile
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile repository over user_profiles.

    `supabase` is the caller's client (anon or actor-scoped); `service_client`
    is the service_role client used only for role / is_active changes.
    """

    def __init__(self, supabase: Client, service_client: Optional[Client] = None):
        self.supabase = supabase
        self.service_client = service_client

    def get_profile(self, identity_id: str) -> Optional[Profile]:
        """Load the profile of an identity. Storage errors propagate to the caller."""
        result = self.supabase.table("user_profiles")\
            .select("*")\
            .eq("id", identity_id)\
            .maybe_single()\
            .execute()
        if result is None or not result.data:
            return None
        return Profile(**result.data)

    def get_profile_by_id(self, profile_id: str) -> ProfileResponse:
        try:
            profile = self.get_profile(profile_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse.model_validate(profile)

    def list_profiles(self, limit: int = 10, offset: int = 0) -> List[ProfileResponse]:
        try:
            result = self.supabase.table("user_profiles")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProfileResponse(**row) for row in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_profile(self, actor: Actor, profile_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Apply the fields that actually change, after checking the profile policy."""
        current = self.get_profile_by_id(profile_id)
        current_values = current.model_dump(mode="json")
        requested = profile_data.model_dump(mode="json", exclude_none=True)
        changes = {k: v for k, v in requested.items() if current_values.get(k) != v}

        if not can_update_profile(actor, profile_id, changes.keys()):
            raise HTTPException(status_code=403, detail="Not allowed to change these profile fields")
        if not changes:
            return current

        client = self.supabase
        if PRIVILEGED_PROFILE_FIELDS & changes.keys():
            if self.service_client is None:
                raise HTTPException(
                    status_code=500,
                    detail="Service role key not configured. Cannot change role or active status."
                )
            client = self.service_client
            logger.info(f"Profile {profile_id} access change by {actor.id}: {sorted(changes)}")

        changes["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = client.table("user_profiles")\
                .update(changes)\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

"""
Request-scoped data contracts shared by the policy evaluator and the session gate.
"""

from enum import Enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Identity(BaseModel):
    """Authenticated user as returned by Supabase Auth. Never mutated here."""
    id: str
    email: Optional[str] = None

    class Config:
        frozen = True


class Profile(BaseModel):
    """Row of user_profiles. One per identity, created by the signup trigger."""
    id: str
    role: Role = Role.VIEWER
    is_active: bool = True
    email: Optional[str] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        frozen = True
        from_attributes = True


class ActorContext(BaseModel):
    """(identity, profile) attached to request.state by the session gate."""
    identity: Identity
    profile: Profile
    access_token: str = Field(repr=False)

    class Config:
        frozen = True


class Actor(BaseModel):
    """Policy view of whoever is acting. id and role are None for anonymous."""
    id: Optional[str] = None
    role: Optional[Role] = None
    is_active: bool = True

    class Config:
        frozen = True

    @property
    def is_anonymous(self) -> bool:
        return self.id is None


ANONYMOUS = Actor()


class ResourceRef(BaseModel):
    """The parts of a content row the policy evaluator looks at."""
    created_by: Optional[str] = None
    is_published: bool = False

    class Config:
        frozen = True

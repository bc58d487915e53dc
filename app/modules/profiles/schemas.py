from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from app.core.context import Role
from app.core.validation import sanitize_string


class ProfileUpdate(BaseModel):
    """Partial profile change. role and is_active are privileged fields."""
    full_name: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def clean_full_name(cls, value: Optional[str]) -> Optional[str]:
        return sanitize_string(value) if value is not None else None


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Role
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

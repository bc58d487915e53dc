from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, List

from app.core.validation import password_problem, sanitize_string
from app.modules.profiles.schemas import ProfileResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        problem = password_problem(value)
        if problem:
            raise ValueError(problem)
        return value

    @field_validator("full_name")
    @classmethod
    def clean_full_name(cls, value: Optional[str]) -> Optional[str]:
        return sanitize_string(value) if value is not None else None


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: Optional[int] = None


class SessionResponse(BaseModel):
    """Returned by login/refresh. The tokens themselves only travel in cookies."""
    user_id: str
    email: Optional[str] = None
    expires_in: Optional[int] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    profile: ProfileResponse
    capabilities: List[str]

from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from app.core.validation import MAX_CONTENT_LENGTH, sanitize_string
from app.modules.sections.schemas import PageType


def _check_length(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > MAX_CONTENT_LENGTH:
        raise ValueError("Content exceeds maximum length")
    return value


class SeoContentUpsert(BaseModel):
    page_type: PageType
    page_id: str
    intro_text: Optional[str] = None
    main_content: Optional[str] = None
    bottom_content: Optional[str] = None

    check_intro_text = field_validator("intro_text")(_check_length)
    check_main_content = field_validator("main_content")(_check_length)
    check_bottom_content = field_validator("bottom_content")(_check_length)

    @field_validator("page_id")
    @classmethod
    def clean_page_id(cls, value: str) -> str:
        value = sanitize_string(value)
        if not value:
            raise ValueError("Page ID is required")
        return value


class SeoContentResponse(BaseModel):
    id: str
    page_type: str
    page_id: str
    intro_text: Optional[str] = None
    main_content: Optional[str] = None
    bottom_content: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

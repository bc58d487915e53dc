from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional
from datetime import datetime

from app.core.validation import MAX_CONTENT_LENGTH, MAX_SORT_ORDER, sanitize_json_data, sanitize_string


class PageType(str, Enum):
    BLOG_POST = "blog_post"
    BLOG_CATEGORY = "blog_category"
    BLOG_TAG = "blog_tag"
    BLOG_AUTHOR = "blog_author"
    HOMEPAGE = "homepage"
    ABOUT = "about"
    PORTFOLIO = "portfolio"
    CUSTOM = "custom"


class SectionType(str, Enum):
    RICH_TEXT = "rich_text"
    FAQ_ACCORDION = "faq_accordion"
    COMPARISON_TABLE = "comparison_table"
    CALLOUT_BOX = "callout_box"
    CHECKLIST = "checklist"
    NUMBERED_STEPS = "numbered_steps"
    FEATURE_HIGHLIGHTS = "feature_highlights"
    TWO_COLUMN_TEXT = "two_column_text"
    CTA_BANNER = "cta_banner"


def _clean_page_id(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = sanitize_string(value)
    if not value:
        raise ValueError("Page ID is required")
    return value


def _check_content(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > MAX_CONTENT_LENGTH:
        raise ValueError("Content exceeds maximum length")
    return value


def _clean_content_data(value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return sanitize_json_data(value) if value is not None else None


class SectionCreate(BaseModel):
    page_type: PageType
    page_id: str
    section_type: SectionType
    title: Optional[str] = None
    content: Optional[str] = None
    content_data: Dict[str, Any] = {}
    sort_order: int = Field(default=0, ge=0, le=MAX_SORT_ORDER)
    is_active: bool = True

    check_page_id = field_validator("page_id")(_clean_page_id)
    check_content = field_validator("content")(_check_content)
    clean_content_data = field_validator("content_data")(_clean_content_data)


class SectionUpdate(BaseModel):
    page_type: Optional[PageType] = None
    page_id: Optional[str] = None
    section_type: Optional[SectionType] = None
    title: Optional[str] = None
    content: Optional[str] = None
    content_data: Optional[Dict[str, Any]] = None
    sort_order: Optional[int] = Field(default=None, ge=0, le=MAX_SORT_ORDER)
    is_active: Optional[bool] = None

    check_page_id = field_validator("page_id")(_clean_page_id)
    check_content = field_validator("content")(_check_content)
    clean_content_data = field_validator("content_data")(_clean_content_data)


class SectionResponse(BaseModel):
    id: str
    page_type: PageType
    page_id: str
    section_type: SectionType
    title: Optional[str] = None
    content: Optional[str] = None
    content_data: Optional[Dict[str, Any]] = None
    sort_order: int = 0
    is_active: bool = True
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.core.validation import sanitize_json_data, sanitize_string
from app.modules.sections.schemas import PageType, SectionType


class TemplateSection(BaseModel):
    section_type: SectionType
    title: Optional[str] = None
    content: Optional[str] = None
    content_data: Dict[str, Any] = {}

    @field_validator("content_data")
    @classmethod
    def clean_content_data(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return sanitize_json_data(value)


class ContentTemplateCreate(BaseModel):
    template_name: str
    page_type: PageType
    sections: List[TemplateSection] = []
    description: Optional[str] = None
    is_public: bool = False

    @field_validator("template_name")
    @classmethod
    def clean_name(cls, value: str) -> str:
        value = sanitize_string(value)
        if not value:
            raise ValueError("Template name is required")
        return value


class ContentTemplateUpdate(BaseModel):
    template_name: Optional[str] = None
    page_type: Optional[PageType] = None
    sections: Optional[List[TemplateSection]] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None


class ContentTemplateResponse(BaseModel):
    id: str
    template_name: str
    page_type: str
    sections: Optional[List[Dict[str, Any]]] = None
    description: Optional[str] = None
    is_public: bool = False
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

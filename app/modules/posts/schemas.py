from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from app.core.validation import MAX_CONTENT_LENGTH, is_valid_slug, is_valid_url, sanitize_string


def _check_slug(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_slug(value):
        raise ValueError("Slug must be lowercase letters, digits and single dashes")
    return value


def _check_url(value: Optional[str]) -> Optional[str]:
    if value and not is_valid_url(value):
        raise ValueError("Must be an http(s) URL")
    return value


class AuthorResponse(BaseModel):
    id: str
    name: str
    slug: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryCreate(BaseModel):
    name: str
    slug: str
    description: Optional[str] = None

    check_slug = field_validator("slug")(_check_slug)


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class TagCreate(BaseModel):
    name: str
    slug: str

    check_slug = field_validator("slug")(_check_slug)


class TagResponse(BaseModel):
    id: str
    name: str
    slug: str
    created_at: Optional[datetime] = None


class PostCreate(BaseModel):
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    hero_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    author_id: Optional[str] = None
    category_id: Optional[str] = None
    published: bool = False
    published_at: Optional[datetime] = None
    tag_ids: List[str] = []

    check_slug = field_validator("slug")(_check_slug)
    check_hero_image = field_validator("hero_image")(_check_url)

    @field_validator("title")
    @classmethod
    def clean_title(cls, value: str) -> str:
        value = sanitize_string(value)
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("content")
    @classmethod
    def check_content_length(cls, value: str) -> str:
        if len(value) > MAX_CONTENT_LENGTH:
            raise ValueError("Content exceeds maximum length")
        return value


class PostUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    hero_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    author_id: Optional[str] = None
    category_id: Optional[str] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None
    tag_ids: Optional[List[str]] = None

    check_slug = field_validator("slug")(_check_slug)
    check_hero_image = field_validator("hero_image")(_check_url)

    @field_validator("content")
    @classmethod
    def check_content_length(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_CONTENT_LENGTH:
            raise ValueError("Content exceeds maximum length")
        return value


class PostResponse(BaseModel):
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    hero_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    author_id: Optional[str] = None
    category_id: Optional[str] = None
    published: bool = False
    published_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tag_ids: List[str] = []

    class Config:
        from_attributes = True

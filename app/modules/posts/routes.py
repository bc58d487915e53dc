from fastapi import APIRouter, Depends
from app.core.context import ActorContext
from app.core.dependencies import get_actor_supabase, get_current_actor
from app.core.policy import actor_from_profile
from app.database.supabase_client import get_supabase
from app.modules.posts.schemas import (
    AuthorResponse, CategoryCreate, CategoryResponse, TagCreate, TagResponse,
    PostCreate, PostUpdate, PostResponse,
)
from app.modules.posts.service import PostService
from supabase import Client
from typing import List, Optional

# Public blog API
router = APIRouter(tags=["posts"])

# CMS, behind the session gate (/cms-admin)
admin_router = APIRouter(tags=["posts-admin"])


def get_public_post_service(supabase: Client = Depends(get_supabase)) -> PostService:
    return PostService(supabase)


def get_post_service(supabase: Client = Depends(get_actor_supabase)) -> PostService:
    return PostService(supabase)


@router.get("/posts", response_model=List[PostResponse])
async def list_published_posts(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    service: PostService = Depends(get_public_post_service),
):
    """Published posts, optionally filtered by category or tag slug."""
    return service.list_published(category_slug=category, tag_slug=tag, limit=limit, offset=offset)


@router.get("/posts/{slug}", response_model=PostResponse)
async def get_published_post(
    slug: str,
    service: PostService = Depends(get_public_post_service),
):
    """Published post by slug."""
    return service.get_published_by_slug(slug)


@router.get("/authors", response_model=List[AuthorResponse])
async def list_authors(service: PostService = Depends(get_public_post_service)):
    return service.list_authors()


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(service: PostService = Depends(get_public_post_service)):
    return service.list_categories()


@router.get("/tags", response_model=List[TagResponse])
async def list_tags(service: PostService = Depends(get_public_post_service)):
    return service.list_tags()


@admin_router.get("/posts", response_model=List[PostResponse])
async def list_posts(
    limit: int = 20,
    offset: int = 0,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    """All posts, drafts included."""
    return service.list_posts(actor_from_profile(actor.profile), limit=limit, offset=offset)


@admin_router.post("/posts", response_model=PostResponse, status_code=201)
async def create_post(
    post_data: PostCreate,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    return service.create_post(actor_from_profile(actor.profile), post_data)


@admin_router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    return service.get_post(actor_from_profile(actor.profile), post_id)


@admin_router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    return service.update_post(actor_from_profile(actor.profile), post_id, post_data)


@admin_router.delete("/posts/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    """Delete a post (admin or its creator)."""
    service.delete_post(actor_from_profile(actor.profile), post_id)
    return None


@admin_router.post("/categories", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    return service.create_category(actor_from_profile(actor.profile), data)


@admin_router.post("/tags", response_model=TagResponse, status_code=201)
async def create_tag(
    data: TagCreate,
    actor: ActorContext = Depends(get_current_actor),
    service: PostService = Depends(get_post_service),
):
    return service.create_tag(actor_from_profile(actor.profile), data)

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from app.config import settings
from app.config.permissions_config import get_role_capabilities
from app.core.context import ActorContext
from app.core.cookies import clear_session_cookies, set_session_cookies
from app.core.dependencies import get_current_actor
from app.core.errors import InvalidOrExpiredToken, UpstreamUnavailable
from app.core.rate_limit import limiter
from app.database.supabase_client import get_auth_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, SessionResponse, RegisterResponse, MeResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Landing page for session gate redirects
login_router = APIRouter(tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_auth_supabase)) -> AuthService:
    return AuthService(supabase)


@login_router.get("/login")
async def login_page(error: Optional[str] = None):
    """Where the session gate sends unauthenticated or unauthorized visitors."""
    return {"message": "Login required", "error": error}


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user (starts as an active viewer)"""
    return service.register(register_data)


@router.post("/login", response_model=SessionResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and store the session in httpOnly cookies"""
    identity, tokens = service.login(login_data)
    set_session_cookies(response, tokens.access_token, tokens.refresh_token)
    return SessionResponse(user_id=identity.id, email=identity.email, expires_in=tokens.expires_in)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange the refresh cookie for a new session. A rejected refresh token ends the session."""
    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No refresh token")
    try:
        identity, tokens = service.refresh_session(refresh_token)
    except InvalidOrExpiredToken:
        denied = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or expired refresh token"}
        )
        clear_session_cookies(denied)
        return denied
    except UpstreamUnavailable as e:
        logger.error(f"Session refresh failed upstream: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Authentication service unavailable")

    body = SessionResponse(user_id=identity.id, email=identity.email, expires_in=tokens.expires_in)
    refreshed = JSONResponse(content=body.model_dump())
    set_session_cookies(refreshed, tokens.access_token, tokens.refresh_token)
    return refreshed


@router.post("/logout", status_code=200)
async def logout(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Revoke the caller's own session and drop the session cookies"""
    access_token = request.cookies.get(settings.access_cookie_name)
    if access_token:
        service.logout(access_token)
    clear_session_cookies(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    actor: ActorContext = Depends(get_current_actor),
):
    """Current user, profile and role capabilities (for frontend UI)."""
    return MeResponse(
        id=actor.identity.id,
        email=actor.identity.email,
        profile=ProfileResponse.model_validate(actor.profile),
        capabilities=get_role_capabilities(actor.profile.role),
    )

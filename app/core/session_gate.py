"""
Session gate: request-time authentication for the admin prefixes.

For a request under a protected prefix the gate
- reads the access token from the sb-access-token cookie,
- validates it against Supabase Auth,
- loads the user_profiles row of the resolved identity,
- applies the coarse admin route policy,
and either attaches an ActorContext to request.state.actor or redirects to
the login page. Nothing is cached between requests and no refresh is attempted
here; refreshing is the client's job (POST /api/v1/auth/refresh).
"""

import logging
from typing import Callable, List, Mapping, Optional, Protocol
from urllib.parse import urlencode

from fastapi import Request, status
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

from app.config import settings
from app.core.context import ActorContext, Identity, Profile
from app.core.cookies import clear_session_cookies
from app.core.errors import (
    InsufficientRole, MissingToken, ProfileInactive,
    ProfileMissing, SessionGateError, UpstreamUnavailable,
)
from app.core.policy import can_access_admin_routes

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def verify_token(self, access_token: str) -> Identity:
        """Return the identity or raise InvalidOrExpiredToken / UpstreamUnavailable."""
        ...


class ProfileRepository(Protocol):
    def get_profile(self, identity_id: str) -> Optional[Profile]:
        """Return the profile, None when there is no row, or raise UpstreamUnavailable."""
        ...


def is_protected_path(path: str, prefixes: List[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def login_redirect_target(error: SessionGateError, login_path: Optional[str] = None) -> str:
    target = login_path or settings.login_path
    if error.error_code:
        return f"{target}?{urlencode({'error': error.error_code})}"
    return target


class SessionGate:
    def __init__(
        self,
        credential_store: CredentialStore,
        profile_repository: ProfileRepository,
        access_cookie_name: Optional[str] = None,
    ):
        self.credential_store = credential_store
        self.profile_repository = profile_repository
        self.access_cookie_name = access_cookie_name or settings.access_cookie_name

    def resolve(self, cookies: Mapping[str, str]) -> ActorContext:
        """Resolve the cookie jar to an active actor of any role, or raise SessionGateError."""
        access_token = cookies.get(self.access_cookie_name)
        if not access_token:
            raise MissingToken("No access token cookie")

        identity = self._verify(access_token)
        profile = self._load_profile(identity.id)

        if profile is None:
            raise ProfileMissing(f"No profile for user {identity.id}")
        if not profile.is_active:
            raise ProfileInactive(f"Profile {identity.id} is inactive")

        return ActorContext(identity=identity, profile=profile, access_token=access_token)

    def authenticate(self, cookies: Mapping[str, str]) -> ActorContext:
        """Like resolve(), but the actor must also pass the admin route policy."""
        context = self.resolve(cookies)
        if not can_access_admin_routes(context.profile):
            raise InsufficientRole(f"Role {context.profile.role.value} may not use admin routes")
        return context

    def _verify(self, access_token: str) -> Identity:
        try:
            return self.credential_store.verify_token(access_token)
        except SessionGateError:
            raise
        except Exception as e:
            raise UpstreamUnavailable(f"Token validation failed: {e}") from e

    def _load_profile(self, identity_id: str) -> Optional[Profile]:
        try:
            return self.profile_repository.get_profile(identity_id)
        except SessionGateError:
            raise
        except Exception as e:
            raise UpstreamUnavailable(f"Profile lookup failed: {e}") from e


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Runs the session gate in front of every route; unprotected paths pass straight through."""

    def __init__(self, app, gate_provider: Callable[[], SessionGate], protected_prefixes: Optional[List[str]] = None):
        super().__init__(app)
        self.gate_provider = gate_provider
        self.protected_prefixes = protected_prefixes or settings.get_protected_prefixes()

    async def dispatch(self, request: Request, call_next) -> Response:
        if not is_protected_path(request.url.path, self.protected_prefixes):
            return await call_next(request)

        try:
            gate = self.gate_provider()
            request.state.actor = await run_in_threadpool(gate.authenticate, request.cookies)
        except SessionGateError as e:
            return self._deny(request, e)
        except Exception as e:
            return self._deny(request, UpstreamUnavailable(f"Session gate setup failed: {e}"))

        return await call_next(request)

    @staticmethod
    def _deny(request: Request, error: SessionGateError) -> Response:
        if isinstance(error, UpstreamUnavailable):
            logger.error("Session gate upstream failure on %s: %s", request.url.path, error)
        else:
            logger.info("Session gate denied %s: %s", request.url.path, error.__class__.__name__)

        response = RedirectResponse(
            url=login_redirect_target(error),
            status_code=status.HTTP_302_FOUND,
        )
        if error.clears_session:
            clear_session_cookies(response)
        return response

"""
Core dependencies for route protection and actor resolution
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from supabase import Client

from app.core.context import ActorContext
from app.core.errors import SessionGateError, UpstreamUnavailable
from app.core.session_gate import SessionGate
from app.database.supabase_client import SupabaseClient, get_supabase

logger = logging.getLogger(__name__)


def get_session_gate() -> SessionGate:
    """Session gate wired to Supabase Auth and the user_profiles table."""
    from app.modules.auth.service import AuthService
    from app.modules.profiles.service import ProfileService

    supabase = get_supabase()
    return SessionGate(AuthService(supabase), ProfileService(supabase))


def get_optional_actor(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> Optional[ActorContext]:
    """Actor attached by the session gate, or resolved from the cookies on unprotected routes. None when anonymous."""
    actor = getattr(request.state, "actor", None)
    if actor is not None:
        return actor
    try:
        actor = gate.resolve(request.cookies)
    except UpstreamUnavailable as e:
        logger.error(f"Actor resolution failed upstream: {e}")
        return None
    except SessionGateError:
        return None
    request.state.actor = actor
    return actor


def get_current_actor(actor: Optional[ActorContext] = Depends(get_optional_actor)) -> ActorContext:
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return actor


def get_actor_supabase(actor: ActorContext = Depends(get_current_actor)) -> Client:
    """Supabase client acting as the current user, so row-level policies apply to every write."""
    return SupabaseClient.get_actor_client(actor.access_token)

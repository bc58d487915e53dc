import logging
from supabase import AuthError, AuthRetryableError, Client
from fastapi import HTTPException
from typing import Tuple

from app.core.context import Identity
from app.core.errors import InvalidOrExpiredToken, UpstreamUnavailable
from app.modules.auth.schemas import LoginRequest, RegisterRequest, RegisterResponse, SessionTokens

logger = logging.getLogger(__name__)


class AuthService:
    """Credential store backed by Supabase Auth."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth. The profile row is written by the signup trigger."""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed: {e}")
            raise HTTPException(status_code=500, detail="Registration failed")

    def login(self, login_data: LoginRequest) -> Tuple[Identity, SessionTokens]:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")

            identity = Identity(id=auth_response.user.id, email=auth_response.user.email or login_data.email)
            return identity, self._tokens(auth_response.session)
        except HTTPException:
            raise
        except AuthRetryableError as e:
            logger.error(f"Supabase Auth unavailable during login: {e}")
            raise HTTPException(status_code=503, detail="Authentication service unavailable")
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed: {e}")
            raise HTTPException(status_code=500, detail="Login failed")

    def verify_token(self, access_token: str) -> Identity:
        """Resolve an access token to its identity. No caching: every call goes to Supabase Auth."""
        try:
            user_response = self.supabase.auth.get_user(jwt=access_token)
        except AuthRetryableError as e:
            raise UpstreamUnavailable(f"Supabase Auth unreachable: {e}") from e
        except AuthError as e:
            if (getattr(e, "status", None) or 0) >= 500:
                raise UpstreamUnavailable(f"Supabase Auth error: {e}") from e
            raise InvalidOrExpiredToken(str(e)) from e
        except Exception as e:
            raise UpstreamUnavailable(f"Token validation failed: {e}") from e

        if not user_response or not user_response.user:
            raise InvalidOrExpiredToken("Invalid or expired token")
        user = user_response.user
        return Identity(id=user.id, email=user.email)

    def refresh_session(self, refresh_token: str) -> Tuple[Identity, SessionTokens]:
        """Exchange a refresh token for a new access/refresh pair."""
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
        except AuthRetryableError as e:
            raise UpstreamUnavailable(f"Supabase Auth unreachable: {e}") from e
        except AuthError as e:
            raise InvalidOrExpiredToken(str(e)) from e
        except Exception as e:
            raise UpstreamUnavailable(f"Session refresh failed: {e}") from e

        if not auth_response or not auth_response.user or not auth_response.session:
            raise InvalidOrExpiredToken("Refresh token rejected")
        identity = Identity(id=auth_response.user.id, email=auth_response.user.email)
        return identity, self._tokens(auth_response.session)

    def logout(self, access_token: str) -> bool:
        """Revoke the session behind this access token only; the cookies are dropped by the route"""
        try:
            self.supabase.auth.admin.sign_out(access_token, "local")
            return True
        except Exception as e:
            logger.warning(f"Supabase sign_out failed: {e}")
            return False

    @staticmethod
    def _tokens(session) -> SessionTokens:
        return SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=getattr(session, "expires_in", None),
        )

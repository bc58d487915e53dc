"""
Session gate failures. Every kind ends in a redirect to the login page; they
differ only in the query annotation and in whether the session cookies are
dropped.
"""

from typing import Optional


class SessionGateError(Exception):
    error_code: Optional[str] = None
    clears_session: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)


class MissingToken(SessionGateError):
    pass


class InvalidOrExpiredToken(SessionGateError):
    clears_session = True


class ProfileMissing(SessionGateError):
    error_code = "inactive"


class ProfileInactive(SessionGateError):
    error_code = "inactive"


class InsufficientRole(SessionGateError):
    error_code = "unauthorized"


class UpstreamUnavailable(SessionGateError):
    """Supabase Auth or the profile table could not be reached or errored."""
    pass

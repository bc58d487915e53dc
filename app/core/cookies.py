from starlette.responses import Response

from app.config import settings


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    """Persist the Supabase session pair as httpOnly cookies (7 day sliding window)."""
    for name, value in (
        (settings.access_cookie_name, access_token),
        (settings.refresh_cookie_name, refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_max_age,
            path="/",
            httponly=True,
            secure=settings.is_production,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(settings.access_cookie_name, path="/")
    response.delete_cookie(settings.refresh_cookie_name, path="/")

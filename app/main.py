import logging
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.dependencies import get_session_gate
from app.core.rate_limit import limiter
from app.core.session_gate import SessionGate, SessionGateMiddleware
from app.modules.auth import routes as auth_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.posts import routes as posts_routes
from app.modules.sections import routes as sections_routes
from app.modules.seo import routes as seo_routes
from app.modules.content_templates import routes as templates_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = [
    (b"X-Frame-Options", b"DENY"),
    (b"X-Content-Type-Options", b"nosniff"),
    (b"X-XSS-Protection", b"1; mode=block"),
    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
    (b"Permissions-Policy", b"camera=(), microphone=(), geolocation=()"),
]
_SECURITY_HEADER_NAMES = {name.lower() for name, _ in SECURITY_HEADERS}


def internal_error_response(exc: Exception) -> JSONResponse:
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    """
    Stamps the fixed security header set on every HTTP response, redirects
    included. Unhandled exceptions are turned into the generic 500 here, since
    the app-level Exception handler runs outside every user middleware.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_with_headers(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = [
                    (name, value) for name, value in message.get("headers", [])
                    if name.lower() not in _SECURITY_HEADER_NAMES
                ]
                headers.extend(SECURITY_HEADERS)
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_headers)
        except Exception as exc:
            if response_started:
                raise
            logger.exception("Unhandled exception: %s", exc)
            await internal_error_response(exc)(scope, receive, send_with_headers)


health_router = APIRouter(tags=["health"])


@health_router.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@health_router.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@health_router.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with Supabase checks if needed."""
    return {"status": "ready"}


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    response = internal_error_response(exc)
    response.headers.update({name.decode(): value.decode() for name, value in SECURITY_HEADERS})
    return response


def create_app(gate_provider: Optional[Callable[[], SessionGate]] = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        redirect_slashes=False,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Last added runs first: CORS, then security headers, then the session gate
    app.add_middleware(SessionGateMiddleware, gate_provider=gate_provider or get_session_gate)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Public site API
    app.include_router(auth_routes.login_router)
    app.include_router(auth_routes.router, prefix="/api/v1")
    app.include_router(profiles_routes.router, prefix="/api/v1")
    app.include_router(posts_routes.router, prefix="/api/v1")
    app.include_router(sections_routes.router, prefix="/api/v1")
    app.include_router(seo_routes.router, prefix="/api/v1")
    app.include_router(templates_routes.router, prefix="/api/v1")

    # Behind the session gate
    app.include_router(posts_routes.admin_router, prefix="/cms-admin/api")
    app.include_router(sections_routes.admin_router, prefix="/cms-admin/api")
    app.include_router(seo_routes.admin_router, prefix="/cms-admin/api")
    app.include_router(templates_routes.admin_router, prefix="/cms-admin/api")
    app.include_router(profiles_routes.admin_router, prefix="/admin/api")

    app.include_router(health_router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Application startup (protected prefixes: %s)", settings.get_protected_prefixes())

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutdown")

    return app


app = create_app()

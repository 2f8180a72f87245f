"""
Application entry point.
Run with:  uvicorn campus_auth.main:app --reload

Set SEED_ADMIN=true to create a development admin account on startup
(see campus_auth/db/seeder.py).
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campus_auth.core.logging_config import configure_logging
from fastapi.middleware.cors import CORSMiddleware

from campus_auth.core.config import settings
from campus_auth.core.exceptions import AuthError
from campus_auth.api.v1.router import api_router
from campus_auth.db.database import get_db, init_db
from campus_auth.db.seeder import seed_admin
from campus_auth.schemas.auth import ApiResponse
from campus_auth.services.refresh_token_service import RefreshTokenService

configure_logging()

logger = logging.getLogger(__name__)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render an AuthError as ``{message, status: false}`` with its HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        logger.warning("%s on %s", type(exc).__name__, request.url.path)
    body = ApiResponse(message=exc.message, status=False)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True),
        headers=exc.headers,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Signup, signin and refresh-token rotation for students and teachers.",
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error handling ──────────────────────────────────────────────────────
    app.add_exception_handler(AuthError, auth_error_handler)

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Initialize the database, drop stale refresh tokens, seed dev data."""
        logger.info("Initializing database")
        init_db()
        with get_db() as conn:
            purged = RefreshTokenService(conn).purge_expired()
        logger.info("Purged %s expired refresh tokens", purged)
        if settings.SEED_ADMIN:
            seed_admin()

    return app


app = create_app()

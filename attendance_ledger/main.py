"""Attendance Ledger — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from attendance_ledger import __version__
from attendance_ledger.common.exceptions import register_exception_handlers
from attendance_ledger.common.rate_limit import limiter
from attendance_ledger.config import settings
from attendance_ledger.database import engine
from attendance_ledger.declarations.router import router as declarations_router
from attendance_ledger.reports.router import router as reports_router
from attendance_ledger.sessions.router import router as sessions_router
from attendance_ledger.staff.router import router as staff_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info(
        "Attendance ledger starting (environment=%s, timezone=%s)",
        settings.ENVIRONMENT,
        settings.LOCAL_TIMEZONE,
    )
    yield
    await engine.dispose()
    logger.info("Attendance ledger stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Attendance Ledger",
        description="Daily attendance declarations, clock sessions and work-time reports",
        version=__version__,
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(staff_router, prefix="/api/v1/staff", tags=["staff"])
    app.include_router(declarations_router, prefix="/api/v1/declarations", tags=["declarations"])
    app.include_router(sessions_router, prefix="/api/v1/sessions", tags=["sessions"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["reports"])

    return app


app = create_app()

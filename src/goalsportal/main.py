"""
SIC Goals Portal FastAPI Application

Data entry for the educator goal-setting and evaluation workflow.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from goalsportal.config import settings
from goalsportal.core.database import close_db, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Verify database connection

    Shutdown:
    - Close database connections
    """
    logger.info("SIC Goals Portal starting...")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    if not settings.SUPABASE_ANON_KEY:
        logger.warning("SUPABASE_ANON_KEY is not set; sign-in requests will be rejected")

    logger.info("SIC Goals Portal ready")

    yield

    logger.info("SIC Goals Portal shutting down...")
    await close_db()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="SIC Goals Portal",
        description="Goal-setting and evaluation data entry",
        version="0.1.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [settings.SITE_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "SIC Goals Portal",
            "status": "operational",
            "version": "0.1.0",
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers."""
        checks: dict[str, dict[str, Any]] = {}

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        checks["identity_provider"] = {
            "status": "healthy" if settings.SUPABASE_ANON_KEY else "unconfigured",
        }

        all_healthy = checks["database"]["status"] == "healthy"
        status_code = 200 if all_healthy else 503

        return JSONResponse(
            status_code=status_code,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Readiness check: 200 once the database answers."""
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ready"}
        except Exception:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready"},
            )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        """Liveness check (200 even if dependencies are down)."""
        return {"status": "alive"}

    # Register API routers
    from goalsportal.api.v1 import admin, auth, parts, roster

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
    app.include_router(roster.router, prefix="/api/v1/roster", tags=["Roster"])
    app.include_router(parts.router, prefix="/api/v1/parts", tags=["Parts"])
    app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "goalsportal.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

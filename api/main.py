"""
Main FastAPI application for the funnel lead service.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import leads, funnels
from .services import get_services, initialize_services
from config.settings import get_settings
from database.session import init_db, close_db, is_initialized

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Funnel lead service starting up...")

    settings = get_settings()
    if settings.database_url:
        try:
            await init_db(settings.database_url)
        except Exception as e:
            logger.warning(f"Database init failed (running without DB): {e}")
    else:
        logger.warning("DATABASE_URL not set, funnel endpoints disabled")

    initialize_services()
    logger.info("Funnel lead service ready")
    yield
    logger.info("Funnel lead service shutting down...")

    get_services().reset()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.api_title,
        description="Lead qualification scoring, follow-up planning and funnel lead analytics.",
        version=settings.api_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(leads.router, prefix="/api/v1", tags=["Leads"])
    app.include_router(funnels.router, prefix="/api/v1", tags=["Funnels"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": "Funnel Lead Qualification",
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready and is_initialized() else "degraded",
            "services": {**services.health(), "database": is_initialized()},
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    s = get_settings()
    uvicorn.run(app, host=s.api_host, port=s.api_port)

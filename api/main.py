"""
Main FastAPI application for the MEDDPICC qualification engine.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routes import assessments, analytics, configuration
from .services import get_services, initialize_services
from .middleware.metrics import MetricsMiddleware, metrics_endpoint
from config.settings import get_settings
from qualification.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("MEDDPICC qualification API starting up...")

    # Initialize database (if configured)
    settings = get_settings()
    if settings.database_url:
        try:
            from database.session import init_db
            await init_db(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
            )
        except Exception as e:
            logger.warning(f"Database init failed (running without DB): {e}")

    initialize_services()
    services = get_services()
    try:
        await services.qualification.load_configuration()
    except (ConfigurationError, StorageError) as e:
        logger.warning(f"Could not load stored configuration, using defaults: {e}")

    logger.info("MEDDPICC qualification API ready")
    yield
    logger.info("MEDDPICC qualification API shutting down...")

    # Close database
    if settings.database_url:
        from database.session import close_db
        await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="MEDDPICC opportunity qualification: scoring, risk, stage readiness and coaching.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics middleware
    app.add_middleware(MetricsMiddleware)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Assessment storage unavailable"})

    # --- Core routers ---
    app.include_router(assessments.router, prefix="/api/v1", tags=["Assessments"])
    app.include_router(analytics.router, prefix="/api/v1", tags=["Analytics"])
    app.include_router(configuration.router, prefix="/api/v1", tags=["Configuration"])

    # --- Prometheus metrics endpoint ---
    app.get("/metrics", tags=["Monitoring"])(metrics_endpoint)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready else "degraded",
            "services": services.health(),
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    s = get_settings()
    uvicorn.run(app, host=s.api_host, port=s.api_port)

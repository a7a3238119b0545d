# Main application entry point
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import (
    connections_router,
    health_router,
    integrations_router,
    notes_router,
    sync_router,
    transfer_router,
    users_router,
)
from .config import get_settings
from .core.exceptions import register_exception_handlers
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting MindNotes application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # Redis only holds OAuth state; the API runs without it
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    if settings.create_tables_on_startup:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise
    else:
        logger.info("Skipping table creation (create_tables_on_startup is off)")

    yield

    logger.info("Shutting down MindNotes application")
    try:
        await redis_client.disconnect()
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Spatial notes with Google Drive and GitHub mirroring",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(notes_router, prefix="/api")
app.include_router(connections_router, prefix="/api")
app.include_router(sync_router, prefix="/api")
app.include_router(transfer_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(integrations_router, prefix="/api")
app.include_router(health_router, prefix="/api")


# Root endpoint
@app.get("/")
async def root():
    return {"message": "MindNotes API", "version": __version__}


# API root endpoint for better navigation
@app.get("/api")
async def api_root():
    return {
        "message": "MindNotes API",
        "version": __version__,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "endpoints": {
            "notes": "/api/notes",
            "connections": "/api/connections",
            "sync": "/api/sync/{drive,github}",
            "export": "/api/export",
            "import": "/api/import",
            "preferences": "/api/user/preferences",
            "integrations": "/api/user/integrations",
            "health": "/api/health"
        }
    }


# Liveness probe without DB access
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mindnotes.main:app", host=settings.host, port=settings.port, reload=settings.reload)

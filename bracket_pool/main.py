"""
Main FastAPI application for the bracket pool sync API.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bracket_pool.core.config import settings
from bracket_pool.core.database import get_db
from bracket_pool.core.exceptions import SyncError
from bracket_pool.core.logging import configure_logging, get_logger
from bracket_pool.core.middleware import CorrelationIdMiddleware
from bracket_pool.core.rate_limit import limiter
from bracket_pool.api.routes.admin import sync as admin_sync

# Load environment variables from .env file
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

configure_logging(
    level=settings.LOG_LEVEL,
    json_output=settings.LOG_JSON
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Keeps a March Madness bracket pool in sync with live tournament data",
    lifespan=lifespan
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Correlation ID middleware must be added before CORS
app.add_middleware(CorrelationIdMiddleware)

# Prometheus instrumentation has to be attached before routes are included
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Admin routes - not versioned (admin tools don't follow API versioning)
app.include_router(admin_sync.router, prefix="/api/admin")


@app.get("/")
@limiter.limit("60/minute")
async def root(request: Request):
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": {
            "admin": {
                "full_sync": "/api/admin/full-sync",
                "import_schedule": "/api/admin/import-schedule",
                "link_games": "/api/admin/link-games",
                "sync_scores": "/api/admin/sync-scores",
                "sync_bracket": "/api/admin/sync-bracket",
                "sync_games": "/api/admin/sync-games",
                "sync_results": "/api/admin/sync-results",
                "sync_logos": "/api/admin/sync-logos",
                "set_winner": "/api/admin/games/{game_id}/winner",
            },
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics",
        }
    }


@app.get("/health")
@limiter.limit("120/minute")
async def health_check(request: Request, db: Session = Depends(get_db)):
    """Health check endpoint; reports degraded when the store is unreachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "version": settings.APP_VERSION, "database": "unreachable"}
        )
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "database": "connected"
    }


# Exception handlers
@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError):
    """Render pipeline errors as {"ok": false, "error": ...} with their status."""
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bracket_pool.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )

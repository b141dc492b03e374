"""
FastAPI application initialization
"""

from fastapi import FastAPI
from api.routes import health, sync
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import async_session_maker
from core.logging import setup_logging
from enrichment.service import KeywordSyncService
import logging

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Publication Keyword Sync API",
    description="Fills publication keywords from PubMed author keywords and MeSH terms",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# One service per process; each run builds its own runner and rate limiter
app.state.sync_service = KeywordSyncService(async_session_maker)

app.include_router(health.router)
app.include_router(sync.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Publication Keyword Sync API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Publication Keyword Sync API")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Publication Keyword Sync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "sync": "/sync/keywords",
            "last_sync": "/sync/keywords/last"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)

"""
Health check endpoint with database and keyword sync status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from api.dependencies import get_db, get_sync_service
from enrichment.loaders.publication_store import PublicationStore
from enrichment.service import KeywordSyncService
from schemas.api import HealthCheckResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    service: KeywordSyncService = Depends(get_sync_service)
):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Publications still waiting for keywords / already enriched
    - Summary of the last sync run in this process
    """
    db_connected = False
    pending = None
    enriched = None

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    if db_connected:
        store = PublicationStore(db)
        try:
            pending = await store.count_pending()
            enriched = await store.count_enriched()
        except Exception as e:
            logger.error(f"Failed to count publications: {str(e)}")

    return HealthCheckResponse(
        database_connected=db_connected,
        last_run=service.last_summary,
        pending_publications=pending,
        enriched_publications=enriched
    )

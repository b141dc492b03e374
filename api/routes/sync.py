"""
On-demand keyword sync trigger
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from api.dependencies import get_sync_service
from enrichment.service import KeywordSyncService, SyncAlreadyRunning
from schemas.keywords import RunSummary
from core.exceptions import StoreUnavailableError
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post("/keywords", response_model=RunSummary)
async def sync_keywords(
    request: Request,
    service: KeywordSyncService = Depends(get_sync_service)
):
    """
    Fill in keywords for every publication that has a PMID but no keywords.

    Returns the run summary. Failed batches and failed writes are counted,
    not raised; the publications involved are picked up by the next run.

    - 409 if a sync is already running in this process
    - 503 if the publications table cannot be queried
    """
    request_id = getattr(request.state, "request_id", None)
    logger.info(f"[{request_id}] POST /sync/keywords")

    try:
        return await service.run_once()
    except SyncAlreadyRunning as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(
            f"[{request_id}] Keyword sync aborted: {e.message}",
            extra={"error_context": e.to_dict()}
        )
        raise HTTPException(
            status_code=503,
            detail={"error": e.message, "error_type": type(e).__name__, "request_id": request_id}
        )


@router.get("/keywords/last", response_model=RunSummary)
async def last_sync(service: KeywordSyncService = Depends(get_sync_service)):
    """Summary of the most recent sync run in this process."""
    if service.last_summary is None:
        raise HTTPException(status_code=404, detail="No keyword sync has run yet")
    return service.last_summary

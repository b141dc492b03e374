"""
On-demand entry point for the keyword sync.

Owns the session factory, an optional run timeout and the last summary
produced in this process. Used by the HTTP trigger and the CLI script.
"""

from typing import Callable, Optional
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import settings
from enrichment.extractors.pubmed_fetcher import PubMedFetcher
from enrichment.loaders.publication_store import PublicationStore
from enrichment.rate_limiter import RateLimiter
from enrichment.runner import KeywordSyncRunner
from models.base import SyncStatus
from schemas.keywords import RunSummary

logger = logging.getLogger(__name__)


class SyncAlreadyRunning(RuntimeError):
    """A sync was triggered while another one is still in progress."""


class KeywordSyncService:
    def __init__(
        self,
        session_maker: async_sessionmaker,
        timeout: Optional[float] = None,
        fetcher_factory: Callable[[], PubMedFetcher] = PubMedFetcher,
        rate_limiter_factory: Callable[[], RateLimiter] = RateLimiter
    ):
        self.SessionLocal = session_maker
        self.timeout = settings.SYNC_TIMEOUT_SECONDS if timeout is None else timeout
        self.fetcher_factory = fetcher_factory
        self.rate_limiter_factory = rate_limiter_factory
        self.last_summary: Optional[RunSummary] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def build_runner(self, session: AsyncSession) -> KeywordSyncRunner:
        # One fetcher and one limiter per run
        return KeywordSyncRunner(
            store=PublicationStore(session),
            fetcher=self.fetcher_factory(),
            rate_limiter=self.rate_limiter_factory(),
        )

    async def run_once(self) -> RunSummary:
        """
        Run one sync and remember its summary.

        Raises:
            SyncAlreadyRunning: Another run holds the lock
            StoreUnavailableError: Candidate selection failed
        """
        if self._lock.locked():
            raise SyncAlreadyRunning("A keyword sync is already running")

        async with self._lock:
            logger.info("Starting keyword sync")
            async with self.SessionLocal() as session:
                runner = self.build_runner(session)
                try:
                    if self.timeout:
                        summary = await asyncio.wait_for(runner.run(), timeout=self.timeout)
                    else:
                        summary = await runner.run()
                except asyncio.TimeoutError:
                    summary = runner.summary or RunSummary()
                    summary.finish()
                    summary.timed_out = True
                    if summary.candidates_found:
                        summary.status = SyncStatus.PARTIAL
                    logger.warning(
                        f"Keyword sync timed out after {self.timeout}s; "
                        f"remaining publications stay candidates: {summary.log_line()}"
                    )
                except Exception:
                    logger.exception("Keyword sync failed")
                    self.last_summary = (runner.summary or RunSummary()).finish()
                    self.last_summary.status = SyncStatus.FAILED
                    raise

            self.last_summary = summary
            return summary

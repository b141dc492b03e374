# ============================================================================
# File: enrichment/runner.py
# Description: Keyword sync orchestrator with per-batch and per-record isolation
# ============================================================================
"""
Keyword Sync Runner - drives select, fetch, extract, merge and write.

This module provides:
- Candidate selection (the only failure that aborts a run)
- Sequential batching with a rate-limit gate between batches
- Per-batch fetch failure isolation
- Per-record write failure isolation
- A RunSummary that is always returned and logged
"""

from typing import Dict, List, Optional
import logging

from enrichment.extractors.pubmed_fetcher import PubMedFetcher
from enrichment.loaders.publication_store import PublicationStore
from enrichment.rate_limiter import RateLimiter
from enrichment.transformers.term_extractor import extract_terms
from enrichment.transformers.term_merger import merge_terms
from schemas.keywords import PublicationCandidate, RunSummary, TermSet
from core.config import settings
from core.exceptions import FetchError, WriteFailureError

logger = logging.getLogger(__name__)


def partition(candidates: List[PublicationCandidate], batch_size: int) -> List[List[PublicationCandidate]]:
    """Consecutive slices of at most ``batch_size``, order preserved."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [candidates[i:i + batch_size] for i in range(0, len(candidates), batch_size)]


class KeywordSyncRunner:
    """
    Keyword sync orchestrator

    Responsibilities:
    - Select publications with a PMID but no keywords
    - Fetch PubMed XML batch by batch, spacing requests with the rate limiter
    - Correlate articles to candidates by the PMID inside each article
    - Write merged keywords, only when non-empty
    - Count everything in a RunSummary

    ``summary`` is updated as the run progresses so a caller that cancels
    the run (e.g. via a timeout) can still report what was done.
    """

    def __init__(
        self,
        store: PublicationStore,
        fetcher: Optional[PubMedFetcher] = None,
        rate_limiter: Optional[RateLimiter] = None,
        batch_size: Optional[int] = None,
        keyword_cap: Optional[int] = None
    ):
        self.store = store
        self.fetcher = fetcher or PubMedFetcher(batch_size=batch_size)
        self.rate_limiter = rate_limiter or RateLimiter()

        # Partitions must fit in a single fetcher request
        fetch_limit = getattr(self.fetcher, "batch_size", None)
        self.batch_size = batch_size or fetch_limit or settings.KEYWORD_BATCH_SIZE
        if fetch_limit and self.batch_size > fetch_limit:
            raise ValueError(
                f"batch_size {self.batch_size} exceeds the fetcher limit of {fetch_limit}"
            )
        self.keyword_cap = settings.KEYWORD_CAP if keyword_cap is None else keyword_cap
        self.summary: Optional[RunSummary] = None

    async def run(self) -> RunSummary:
        """
        Run one keyword sync.

        Returns:
            RunSummary with candidates_found, batches_processed, batches_failed,
            records_updated and records_skipped

        Raises:
            StoreUnavailableError: Candidate selection failed; nothing was written
        """
        summary = self.summary = RunSummary()

        # --------------------------------------------------
        # SELECTING
        # --------------------------------------------------
        candidates = await self.store.select_candidates()
        summary.candidates_found = len(candidates)

        if not candidates:
            logger.info("All publications already have keywords")
            summary.finish()
            logger.info(f"Keyword sync finished: {summary.log_line()}")
            return summary

        batches = partition(candidates, self.batch_size)
        logger.info(
            f"Syncing keywords for {len(candidates)} publications "
            f"in {len(batches)} batches of up to {self.batch_size}"
        )

        # --------------------------------------------------
        # PER BATCH: FETCH -> EXTRACT -> MERGE -> WRITE
        # --------------------------------------------------
        for index, batch in enumerate(batches, start=1):
            if index > 1:
                await self.rate_limiter.await_slot()

            await self._process_batch(index, batch)

        # --------------------------------------------------
        # REPORTING
        # --------------------------------------------------
        summary.finish()
        logger.info(f"Keyword sync finished: {summary.log_line()}")
        return summary

    async def _process_batch(self, index: int, batch: List[PublicationCandidate]) -> None:
        """
        Fetch, merge and write one batch.

        Counters go straight into ``self.summary`` per record, so a run
        cancelled mid-batch still reports every write that committed.
        """
        summary = self.summary
        try:
            articles = await self.fetcher.fetch_batch([c.pmid for c in batch])
        except FetchError as e:
            summary.batches_processed += 1
            summary.batches_failed += 1
            summary.records_skipped += len(batch)
            logger.error(
                f"Batch {index} fetch failed, skipping {len(batch)} publications: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return
        finally:
            self.rate_limiter.mark()

        summary.batches_processed += 1
        term_sets = self.correlate(batch, articles)

        updated = 0
        skipped = 0
        for candidate in batch:
            term_set = term_sets.get(candidate.pmid)
            if term_set is None:
                logger.debug(f"No article returned for PMID {candidate.pmid}")
                skipped += 1
                summary.records_skipped += 1
                continue

            keywords = merge_terms(term_set, self.keyword_cap)
            if not keywords:
                logger.debug(f"PMID {candidate.pmid} has no keywords or MeSH terms")
                skipped += 1
                summary.records_skipped += 1
                continue

            try:
                await self.store.update_keywords(candidate.id, keywords)
                updated += 1
                summary.records_updated += 1
            except WriteFailureError as e:
                e.context["pmid"] = candidate.pmid
                logger.warning(
                    f"Keyword write failed for publication {candidate.id}: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
                skipped += 1
                summary.records_skipped += 1

        logger.info(
            f"Batch {index}: {len(articles)} articles, {updated} updated, {skipped} skipped"
        )

    @staticmethod
    def correlate(batch: List[PublicationCandidate], articles: List[str]) -> Dict[str, TermSet]:
        """
        Map PMID -> TermSet using the PMID embedded in each article.

        Articles without a PMID, or whose PMID was not requested in this
        batch, are discarded. The first article for a PMID wins.
        """
        wanted = {c.pmid for c in batch}
        term_sets: Dict[str, TermSet] = {}

        for article in articles:
            term_set = extract_terms(article)
            if term_set is None:
                continue
            if term_set.pmid not in wanted:
                logger.debug(f"Discarding article for unrequested PMID {term_set.pmid}")
                continue
            term_sets.setdefault(term_set.pmid, term_set)

        return term_sets

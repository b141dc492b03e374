"""
Keyword enrichment pipeline for publications.

Finds publications that have a PMID but no keywords, fetches their PubMed
records in bulk, extracts author keywords and MeSH descriptors, merges
them and writes the result back.

Modules:
    rate_limiter: Minimum-interval gate between batch requests
    runner: Orchestrator (select -> fetch -> extract -> merge -> write)
    service: On-demand entry point used by the API and CLI

Subpackages:
    extractors: PubMed efetch batch fetcher and article splitting
    transformers: Term extraction and merging
    loaders: Publication record store

Architecture:
    1. Select - publications with pmid and NULL/empty keywords
    2. Fetch - one efetch request per batch of up to 200 PMIDs
    3. Extract - <Keyword> and <DescriptorName> per <PubmedArticle>
    4. Merge - author keywords first, dedup, cap at 15
    5. Write - one UPDATE per publication, only for non-empty results

    A failed batch or a failed write is counted and skipped; only a
    failed candidate query aborts the run. Enriched rows are never
    selected again, so repeated runs converge.

Usage:
    from enrichment.runner import KeywordSyncRunner
    from enrichment.loaders.publication_store import PublicationStore

Example:
    async with async_session_maker() as session:
        runner = KeywordSyncRunner(PublicationStore(session))
        summary = await runner.run()

    print(f"Updated {summary.records_updated} publications")
"""

__all__ = [
    "KeywordSyncRunner",
    "KeywordSyncService",
    "PubMedFetcher",
    "PublicationStore",
    "RateLimiter",
    "extract_terms",
    "merge_terms",
]

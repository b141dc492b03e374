"""
Core utilities and configuration for the publication keyword sync service.

Modules:
    config: Application configuration and environment variable management
    database: Database connection and session management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import FetchError, StoreUnavailableError
    from core.logging import setup_logging

Example:
    setup_logging()

    async with async_session_maker() as session:
        store = PublicationStore(session)
        candidates = await store.select_candidates()
"""

__all__ = [
    "settings",
    "async_session_maker",
    "get_session",
    "setup_logging",
    # Exceptions
    "KeywordSyncException",
    "RetryableError",
    "NonRetryableError",
    "StoreError",
    "StoreUnavailableError",
    "WriteFailureError",
    "FetchError",
    "NetworkError",
    "RateLimitError",
    "ServiceUnavailableError",
    "BadResponseError",
]

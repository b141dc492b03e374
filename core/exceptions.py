"""
Custom exceptions for the keyword sync pipeline with structured error context.

Every exception carries context information for debugging and logging.
Only StoreUnavailableError is meant to escape a sync run; the other
kinds are absorbed by the runner into the RunSummary counters.

Exception Hierarchy:
    KeywordSyncException (base)
    ├── StoreError
    │   ├── StoreUnavailableError
    │   └── WriteFailureError
    ├── FetchError
    │   ├── NetworkError
    │   ├── RateLimitError
    │   ├── ServiceUnavailableError
    │   └── BadResponseError
    └── RetryableError / NonRetryableError (mixins)
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class KeywordSyncException(Exception):
    """
    Base exception for all keyword sync errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (batch, pmid, status code, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Retry Strategy Mixins
# ============================================================================

class RetryableError(KeywordSyncException):
    """
    Mixin for errors that may succeed when the request is repeated.

    Use this for transient errors like:
    - Network timeouts and dropped connections
    - Rate limiting (HTTP 429)
    - Service unavailable (HTTP 5xx)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ):
        super().__init__(message, context, original_exception)
        self.max_retries = max_retries
        self.retry_delay = retry_delay


class NonRetryableError(KeywordSyncException):
    """Mixin for permanent errors (bad request, not found, forbidden)."""
    pass


# ============================================================================
# Record Store Errors
# ============================================================================

class StoreError(KeywordSyncException):
    """Base exception for record store failures."""
    pass


class StoreUnavailableError(StoreError):
    """
    Candidate selection could not run. Fatal for the sync run.

    Context should include:
        - operation: SELECT
        - table_name: publications
    """
    pass


class WriteFailureError(StoreError):
    """
    Keyword update failed for one publication. Counted as skipped.

    Context should include:
        - publication_id: Internal id of the publication
        - pmid: PubMed identifier
        - operation: UPDATE
    """
    pass


# ============================================================================
# Fetch Errors
# ============================================================================

class FetchError(KeywordSyncException):
    """
    One batch request to PubMed failed. The batch yields zero updates.

    Context should include:
        - api_url: The endpoint that failed
        - status_code: HTTP status code (if applicable)
        - batch_size: Number of PMIDs in the request
        - attempts: Number of attempts made
    """
    pass


class NetworkError(RetryableError, FetchError):
    """Timeouts and transport-level failures."""
    pass


class RateLimitError(RetryableError, FetchError):
    """HTTP 429 from E-utilities."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message, context, original_exception)
        self.retry_after = retry_after  # Seconds to wait before retry
        if retry_after:
            self.context["retry_after"] = retry_after


class ServiceUnavailableError(RetryableError, FetchError):
    """HTTP 5xx from E-utilities."""
    pass


class BadResponseError(NonRetryableError, FetchError):
    """Any other non-success response (400, 403, 404, ...)."""
    pass

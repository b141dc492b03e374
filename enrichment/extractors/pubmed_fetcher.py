"""
PubMed E-utilities batch fetcher.

One ``efetch`` request per batch of PMIDs; the XML body is split into one
fragment per <PubmedArticle>. Provides:
- Structured FetchError subclasses for transport and HTTP failures
- Optional retry with exponential backoff (off by default)
"""

import httpx
import asyncio
import re
from typing import List, Dict, Any, Optional, Sequence
from core.config import settings
from core.exceptions import (
    NetworkError,
    RateLimitError,
    ServiceUnavailableError,
    BadResponseError,
    RetryableError
)
import logging

logger = logging.getLogger(__name__)

# Matches <PubmedArticle> and <PubmedArticle attr="..."> but not <PubmedArticleSet>
ARTICLE_START = re.compile(r"<PubmedArticle(?:\s[^>]*)?>")


def split_articles(body: str) -> List[str]:
    """
    Split an efetch body into per-article fragments.

    Text before the first start marker (XML declaration, DOCTYPE,
    <PubmedArticleSet>) is dropped. No markers means no fragments.
    """
    if not body:
        return []
    parts = ARTICLE_START.split(body)
    return [part for part in parts[1:] if part.strip()]


class PubMedFetcher:
    """
    Fetch PubMed XML for batches of PMIDs.

    Attributes:
        base_url: E-utilities base URL
        batch_size: Maximum PMIDs per request (NCBI documents 200 for GET)
        max_attempts: Total attempts per batch; 1 means no retry
        retry_delay: Initial backoff delay in seconds
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        tool: Optional[str] = None,
        email: Optional[str] = None,
        batch_size: Optional[int] = None,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url or settings.PUBMED_EUTILS_URL).rstrip("/")
        self.api_key = api_key or settings.PUBMED_API_KEY
        self.tool = tool or settings.PUBMED_TOOL
        self.email = email or settings.PUBMED_EMAIL
        self.batch_size = batch_size or settings.KEYWORD_BATCH_SIZE
        self.max_attempts = max(1, max_attempts or settings.PUBMED_MAX_ATTEMPTS)
        self.retry_delay = settings.PUBMED_RETRY_DELAY if retry_delay is None else retry_delay
        self.timeout = timeout or settings.PUBMED_TIMEOUT

    @property
    def efetch_url(self) -> str:
        return f"{self.base_url}/efetch.fcgi"

    def build_params(self, pmids: Sequence[str]) -> Dict[str, Any]:
        params = {
            "db": "pubmed",
            "id": ",".join(pmids),
            "retmode": "xml",
        }
        if self.api_key:
            params["api_key"] = self.api_key
        if self.tool:
            params["tool"] = self.tool
        if self.email:
            params["email"] = self.email
        return params

    def _check_response(self, response: httpx.Response, context: Dict[str, Any]):
        """Raise the matching FetchError for a non-success response."""
        status = response.status_code
        if 200 <= status < 300:
            return

        context = {**context, "status_code": status, "response_body": response.text[:500]}

        if status == 429:
            retry_after = response.headers.get("Retry-After")
            try:
                retry_after = float(retry_after) if retry_after else None
            except ValueError:
                retry_after = None
            raise RateLimitError(
                "PubMed rate limit exceeded",
                context=context,
                retry_after=retry_after
            )

        if status >= 500:
            raise ServiceUnavailableError(f"PubMed server error {status}", context=context)

        raise BadResponseError(f"PubMed returned HTTP {status}", context=context)

    async def _request(self, client: httpx.AsyncClient, params: Dict[str, Any], context: Dict[str, Any]) -> httpx.Response:
        try:
            response = await client.get(self.efetch_url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise NetworkError(
                "Request to PubMed timed out",
                context={**context, "timeout": self.timeout},
                original_exception=e
            )
        except httpx.HTTPError as e:
            raise NetworkError(
                "Network error talking to PubMed",
                context=context,
                original_exception=e
            )

        self._check_response(response, context)
        return response

    async def fetch_batch(self, pmids: Sequence[str]) -> List[str]:
        """
        Fetch one batch and split the body into article fragments.

        Args:
            pmids: At most ``batch_size`` PubMed identifiers

        Returns:
            One text fragment per <PubmedArticle> in the response

        Raises:
            FetchError: Transport failure or non-success response
            ValueError: More PMIDs than ``batch_size``
        """
        pmids = [str(p) for p in pmids]
        if len(pmids) > self.batch_size:
            raise ValueError(
                f"Batch of {len(pmids)} PMIDs exceeds batch size {self.batch_size}"
            )
        if not pmids:
            return []

        context = {"api_url": self.efetch_url, "batch_size": len(pmids)}

        params = self.build_params(pmids)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_attempts):
                try:
                    logger.debug(
                        f"efetch attempt {attempt + 1}/{self.max_attempts} for {len(pmids)} PMIDs"
                    )
                    response = await self._request(
                        client, params, {**context, "attempts": attempt + 1}
                    )
                    break

                except RetryableError as e:
                    if attempt >= self.max_attempts - 1:
                        raise

                    delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                    if isinstance(e, RateLimitError) and e.retry_after:
                        delay = max(delay, e.retry_after)
                    logger.warning(
                        f"{e.message}. Retrying in {delay} seconds "
                        f"(attempt {attempt + 1}/{self.max_attempts})"
                    )
                    await asyncio.sleep(delay)

        articles = split_articles(response.text)
        logger.info(f"Fetched {len(articles)} articles for {len(pmids)} PMIDs")
        return articles

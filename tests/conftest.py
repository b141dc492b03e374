"""
Pytest configuration and fixtures
"""

import pytest
from typing import Dict, List, Optional, Sequence, Set
from unittest.mock import AsyncMock

from core.exceptions import FetchError, StoreUnavailableError, WriteFailureError
from enrichment.rate_limiter import RateLimiter
from schemas.keywords import PublicationCandidate


def build_article(pmid: str, keywords: Sequence[str] = (), mesh: Sequence[str] = ()) -> str:
    """One <PubmedArticle> element shaped like real efetch output"""
    mesh_xml = "".join(
        f'<MeshHeading><DescriptorName UI="D{i:06d}" MajorTopicYN="N">{term}</DescriptorName>'
        f'<QualifierName UI="Q000502" MajorTopicYN="N">physiology</QualifierName></MeshHeading>'
        for i, term in enumerate(mesh)
    )
    keyword_xml = "".join(f'<Keyword MajorTopicYN="N">{term}</Keyword>' for term in keywords)
    return (
        "<PubmedArticle>"
        '<MedlineCitation Status="MEDLINE" Owner="NLM">'
        f'<PMID Version="1">{pmid}</PMID>'
        "<Article><ArticleTitle>Test article</ArticleTitle></Article>"
        f"<MeshHeadingList>{mesh_xml}</MeshHeadingList>"
        f'<KeywordList Owner="NOTNLM">{keyword_xml}</KeywordList>'
        "</MedlineCitation>"
        "</PubmedArticle>"
    )


def build_body(articles: Sequence[str]) -> str:
    """Wrap articles in an efetch response envelope"""
    return (
        '<?xml version="1.0" ?>\n'
        '<!DOCTYPE PubmedArticleSet PUBLIC "-//NLM//DTD PubMedArticle, 1st January 2024//EN" '
        '"https://dtd.nlm.nih.gov/ncbi/pubmed/out/pubmed_240101.dtd">\n'
        "<PubmedArticleSet>\n" + "\n".join(articles) + "\n</PubmedArticleSet>"
    )


class InMemoryPublicationStore:
    """Record store double with the same contract as PublicationStore"""

    def __init__(self, rows: List[Dict], fail_ids: Optional[Set[str]] = None, unavailable: bool = False):
        self.rows = {row["id"]: dict(row) for row in rows}
        self.fail_ids = fail_ids or set()
        self.unavailable = unavailable
        self.writes: List[str] = []

    async def select_candidates(self) -> List[PublicationCandidate]:
        if self.unavailable:
            raise StoreUnavailableError("connection refused", context={"operation": "SELECT"})
        return [
            PublicationCandidate(id=row["id"], pmid=row["pmid"])
            for row in self.rows.values()
            if (row.get("pmid") or "").strip() and not row.get("keywords")
        ]

    async def update_keywords(self, publication_id: str, keywords: Sequence[str]) -> None:
        if publication_id in self.fail_ids:
            raise WriteFailureError("simulated write failure", context={"publication_id": publication_id})
        self.rows[publication_id]["keywords"] = list(keywords)
        self.writes.append(publication_id)

    def keywords(self, publication_id: str):
        return self.rows[publication_id].get("keywords")


class StubFetcher:
    """Serves canned articles; raises FetchError on the configured call numbers"""

    def __init__(self, articles: Dict[str, str], fail_on_calls: Optional[Set[int]] = None):
        self.articles = articles
        self.fail_on_calls = fail_on_calls or set()
        self.calls: List[List[str]] = []

    async def fetch_batch(self, pmids: Sequence[str]) -> List[str]:
        self.calls.append(list(pmids))
        if len(self.calls) in self.fail_on_calls:
            raise FetchError("simulated outage", context={"batch_size": len(pmids)})
        return [self.articles[p] for p in pmids if p in self.articles]


@pytest.fixture
def make_article():
    return build_article


@pytest.fixture
def make_body():
    return build_body


@pytest.fixture
def instant_rate_limiter():
    """RateLimiter that records waits without sleeping"""
    return RateLimiter(min_interval=0.4, sleep=AsyncMock())


@pytest.fixture
def publication_rows():
    """450 candidates plus rows that must never be selected"""
    rows = [
        {"id": f"pub-{i:04d}", "pmid": str(30000000 + i), "keywords": None}
        for i in range(450)
    ]
    rows.append({"id": "no-pmid", "pmid": None, "keywords": None})
    rows.append({"id": "enriched", "pmid": "29999999", "keywords": ["already", "done"]})
    return rows


@pytest.fixture
def pubmed_articles():
    """One article per candidate PMID in publication_rows"""
    return {
        str(30000000 + i): build_article(
            str(30000000 + i),
            keywords=[f"keyword {i}"],
            mesh=["Humans", f"Descriptor {i}"],
        )
        for i in range(450)
    }


@pytest.fixture
def store_factory():
    return InMemoryPublicationStore


@pytest.fixture
def fetcher_factory():
    return StubFetcher

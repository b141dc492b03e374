"""
Pydantic schemas for data validation and serialization.

Schemas:
    keywords: Pipeline data (PublicationCandidate, TermSet, RunSummary)
    api: HTTP response models (HealthCheckResponse, ErrorResponse)

Usage:
    from schemas.keywords import TermSet, RunSummary
    from schemas.api import HealthCheckResponse

Example:
    terms = TermSet(pmid="31234567", primary=["apoptosis"], supplementary=["Neurons"])
    assert terms.primary == ["apoptosis"]
"""

__all__ = [
    "PublicationCandidate",
    "TermSet",
    "RunSummary",
    "HealthCheckResponse",
    "ErrorResponse",
]

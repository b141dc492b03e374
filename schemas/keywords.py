"""
Pydantic schemas for the keyword sync pipeline
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime, timezone
from models.base import SyncStatus


class PublicationCandidate(BaseModel):
    """A publication that has a PMID but no keywords yet"""
    id: str
    pmid: str = Field(..., min_length=1, max_length=32)

    @validator("pmid", pre=True)
    def clean_pmid(cls, v):
        if v is None:
            raise ValueError("pmid is required")
        return str(v).strip()

    class Config:
        from_attributes = True


class TermSet(BaseModel):
    """
    Terms extracted from one <PubmedArticle> fragment.

    primary: author keywords (<Keyword>)
    supplementary: MeSH descriptor names (<DescriptorName>)
    """
    pmid: str
    primary: List[str] = Field(default_factory=list)
    supplementary: List[str] = Field(default_factory=list)

    @validator("primary", "supplementary", pre=True)
    def drop_blank_terms(cls, v):
        if v is None:
            return []
        return [str(t).strip() for t in v if str(t).strip()]


class RunSummary(BaseModel):
    """Counters for one keyword sync run. Returned and logged, never stored."""
    candidates_found: int = 0
    batches_processed: int = 0
    batches_failed: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    timed_out: bool = False

    status: SyncStatus = SyncStatus.RUNNING
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    def finish(self) -> "RunSummary":
        """Stamp completion time and derive the final status."""
        self.completed_at = datetime.now(timezone.utc)
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

        if self.candidates_found == 0:
            self.status = SyncStatus.NO_CANDIDATES
        elif self.batches_failed or self.records_skipped:
            self.status = SyncStatus.PARTIAL
        else:
            self.status = SyncStatus.SUCCESS
        return self

    def log_line(self) -> str:
        return (
            f"status={self.status.value} candidates={self.candidates_found} "
            f"batches={self.batches_processed} (failed={self.batches_failed}) "
            f"updated={self.records_updated} skipped={self.records_skipped}"
        )

    class Config:
        json_schema_extra = {
            "example": {
                "candidates_found": 450,
                "batches_processed": 3,
                "batches_failed": 0,
                "records_updated": 431,
                "records_skipped": 19,
                "status": "partial_success",
                "started_at": "2024-01-15T10:00:00Z",
                "completed_at": "2024-01-15T10:00:04Z",
                "duration_seconds": 4.2
            }
        }

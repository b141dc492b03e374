"""
Read candidates from and write keywords to the publications table
"""

from typing import List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_, and_
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError
from models.publication import Publication
from schemas.keywords import PublicationCandidate
from core.exceptions import StoreUnavailableError, WriteFailureError
import logging

logger = logging.getLogger(__name__)


def candidate_filter():
    """PMID present and not blank, keywords NULL or empty."""
    return and_(
        Publication.pmid.isnot(None),
        func.trim(Publication.pmid) != "",
        or_(
            Publication.keywords.is_(None),
            func.cardinality(Publication.keywords) == 0,
        ),
    )


class PublicationStore:
    """
    Record store used by the keyword sync.

    Ensures:
    - Candidate selection never returns enriched rows, so repeated runs
      do not rewrite good data
    - Each keyword write commits on its own; one bad row does not roll
      back its siblings
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def select_candidates(self) -> List[PublicationCandidate]:
        """
        All publications eligible for enrichment, in a stable order.

        Raises:
            StoreUnavailableError: The query could not run
        """
        try:
            result = await self.db.execute(
                select(Publication.id, Publication.pmid)
                .where(candidate_filter())
                .order_by(Publication.created_at, Publication.id)
            )
            rows = result.all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                "Failed to select keyword candidates",
                context={"operation": "SELECT", "table_name": "publications"},
                original_exception=e
            )

        candidates = []
        for row in rows:
            try:
                candidates.append(PublicationCandidate(id=str(row.id), pmid=row.pmid))
            except ValidationError as e:
                logger.warning(
                    f"Skipping publication {row.id} with unusable PMID {row.pmid!r}: "
                    f"{e.errors()[0]['msg']}"
                )
        logger.info(f"Found {len(candidates)} publications without keywords")
        return candidates

    async def update_keywords(self, publication_id: str, keywords: Sequence[str]) -> None:
        """
        Set keywords for exactly one publication.

        Raises:
            WriteFailureError: The update failed or matched no row
        """
        context = {
            "publication_id": publication_id,
            "operation": "UPDATE",
            "table_name": "publications",
        }
        try:
            result = await self.db.execute(
                update(Publication)
                .where(Publication.id == publication_id)
                .values(keywords=list(keywords))
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise WriteFailureError("No publication matched the update", context=context)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise WriteFailureError(
                "Failed to update publication keywords",
                context=context,
                original_exception=e
            )

    async def count_pending(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Publication).where(candidate_filter())
        )
        return result.scalar() or 0

    async def count_enriched(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Publication).where(
                func.cardinality(Publication.keywords) > 0
            )
        )
        return result.scalar() or 0

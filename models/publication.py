from sqlalchemy import Column, String, Integer, DateTime, Text, Float
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from datetime import datetime
import uuid
from models.base import Base


class Publication(Base):
    """
    A bibliographic record, usually a journal article indexed by PubMed.

    The keyword sync only reads ``pmid`` and writes ``keywords``:

    - pmid -> efetch ``id`` parameter
    - <Keyword> + <DescriptorName> -> keywords (author keywords first,
      MeSH descriptors after, deduplicated, capped)

    A row with a PMID and NULL or empty keywords is a sync candidate.
    Once keywords are set the row is never selected again, so repeated
    runs converge instead of rewriting good data.
    """
    __tablename__ = "publications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Bibliographic identifiers
    pmid = Column(String(32), nullable=True, index=True)
    doi = Column(String(255), nullable=True)
    pubmed_link = Column(String(2048), nullable=True)

    # Descriptive fields
    title = Column(Text, nullable=False)
    authors = Column(Text, nullable=True)
    author_orcids = Column(JSONB, nullable=True)
    journal = Column(String(500), nullable=True)
    year = Column(Integer, nullable=True)
    citations = Column(Integer, nullable=True)
    rcr = Column(Float, nullable=True)  # Relative Citation Ratio

    # Enriched by the keyword sync
    keywords = Column(ARRAY(Text), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Publication id={self.id} pmid={self.pmid}>"

"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and the SyncStatus enum
    publication: Bibliographic records enriched with keywords

Usage:
    from models.base import Base, SyncStatus
    from models.publication import Publication

Example:
    pub = Publication(title="Synaptic pruning in development", pmid="31234567")
    session.add(pub)
    await session.commit()
"""

__all__ = [
    "Base",
    "SyncStatus",
    "Publication",
]

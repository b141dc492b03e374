from enrichment.loaders.publication_store import PublicationStore

__all__ = ["PublicationStore"]

from enrichment.extractors.pubmed_fetcher import PubMedFetcher, split_articles

__all__ = ["PubMedFetcher", "split_articles"]

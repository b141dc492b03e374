from enrichment.transformers.term_extractor import extract_terms
from enrichment.transformers.term_merger import merge_terms, DEFAULT_KEYWORD_CAP

__all__ = ["extract_terms", "merge_terms", "DEFAULT_KEYWORD_CAP"]

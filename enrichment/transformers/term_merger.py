"""
Merge primary and supplementary terms into the final keyword list
"""

from typing import List

from schemas.keywords import TermSet

DEFAULT_KEYWORD_CAP = 15


def merge_terms(term_set: TermSet, cap: int = DEFAULT_KEYWORD_CAP) -> List[str]:
    """
    Author keywords first, then MeSH descriptors; exact-match dedup keeping
    the first occurrence; at most ``cap`` entries, overflow dropped from the tail.

    An empty result means there is nothing to write.
    """
    if cap < 0:
        raise ValueError(f"cap must be >= 0, got {cap}")

    merged = []
    seen = set()
    for term in [*term_set.primary, *term_set.supplementary]:
        if len(merged) >= cap:
            break
        if term in seen:
            continue
        seen.add(term)
        merged.append(term)

    return merged

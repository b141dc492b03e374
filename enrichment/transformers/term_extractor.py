"""
Extract keyword terms from a single <PubmedArticle> fragment.

The efetch body is treated as untrusted text. Instead of building a DOM
(which fails on a truncated or partially malformed body) each field is
scanned independently, so a broken field costs only that field's terms.
"""

from typing import List, Optional
import html
import logging
import re

from schemas.keywords import TermSet

logger = logging.getLogger(__name__)

# First PMID in the fragment belongs to MedlineCitation; later ones come
# from CommentsCorrections / ReferenceList.
PMID_PATTERN = re.compile(r"<PMID(?:\s[^>]*)?>\s*(\d+)\s*</PMID\s*>")

KEYWORD_PATTERN = re.compile(r"<Keyword(?:\s[^>]*)?>([^<]+)</Keyword\s*>")
DESCRIPTOR_PATTERN = re.compile(r"<DescriptorName(?:\s[^>]*)?>([^<]+)</DescriptorName\s*>")

_WHITESPACE = re.compile(r"\s+")


def extract_pmid(raw_unit: str) -> Optional[str]:
    """Return the first PMID in the fragment, or None."""
    if not raw_unit:
        return None
    match = PMID_PATTERN.search(raw_unit)
    return match.group(1) if match else None


def clean_term(value: str) -> str:
    """Unescape character references and collapse whitespace."""
    return _WHITESPACE.sub(" ", html.unescape(value)).strip()


def find_terms(pattern: re.Pattern, raw_unit: str) -> List[str]:
    """All non-blank matches of ``pattern`` in source order."""
    terms = []
    for match in pattern.finditer(raw_unit):
        term = clean_term(match.group(1))
        if term:
            terms.append(term)
    return terms


def extract_terms(raw_unit: str) -> Optional[TermSet]:
    """
    Extract author keywords and MeSH descriptors from one fragment.

    Args:
        raw_unit: Text of one <PubmedArticle> element, possibly malformed

    Returns:
        TermSet, or None when the fragment carries no PMID
    """
    pmid = extract_pmid(raw_unit)
    if pmid is None:
        logger.debug(f"Discarding fragment without PMID ({len(raw_unit or '')} chars)")
        return None

    return TermSet(
        pmid=pmid,
        primary=find_terms(KEYWORD_PATTERN, raw_unit),
        supplementary=find_terms(DESCRIPTOR_PATTERN, raw_unit),
    )

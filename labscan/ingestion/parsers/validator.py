import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from labscan.constants import HEALTH_TERMS, CATEGORY_KEYWORDS, OTHER_CATEGORY

logger = logging.getLogger(__name__)

MAX_INITIALISM_LEN = 5


def _flatten(terms: Dict[str, List[str]]) -> List[str]:
    return [t for group in terms.values() for t in group]


def _contains_either(name: str, term: str) -> bool:
    return term in name or name in term


def is_initialism(name: str, term: str) -> bool:
    """True if `name` spells the first letters of a multi-word `term` (e.g. "bp" for "blood pressure")."""
    words = term.split()
    if len(words) < 2 or len(name) > MAX_INITIALISM_LEN or len(term) <= len(name):
        return False
    return "".join(w[0] for w in words).lower() == name.lower()


def is_valid_parameter(name: str, terms: Optional[Dict[str, List[str]]] = None) -> bool:
    """
    Decide whether a cleaned name plausibly denotes a clinical parameter.

    Recall-biased: a substring hit in either direction is enough, so truncated
    OCR output ("Hemoglo") still passes. Short names are also accepted when they
    are the initials of a multi-word term.

    Args:
        name: Cleaned parameter name.
        terms: Term dictionary grouped by domain; defaults to HEALTH_TERMS.
    """
    lower = (name or "").strip().lower()
    if not lower:
        return False
    for term in _flatten(terms if terms is not None else HEALTH_TERMS):
        if _contains_either(lower, term) or is_initialism(lower, term):
            return True
    logger.debug(f"Rejected parameter name: {name!r}")
    return False


def categorize(name: str, categories: Optional[Sequence[Tuple[str, Iterable[str]]]] = None) -> str:
    """Return the first declared category with a keyword matching `name`, else "Other"."""
    lower = (name or "").strip().lower()
    if not lower:
        return OTHER_CATEGORY
    for category, keywords in categories if categories is not None else CATEGORY_KEYWORDS:
        if any(_contains_either(lower, kw) for kw in keywords):
            return category
    return OTHER_CATEGORY

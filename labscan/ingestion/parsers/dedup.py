import re
import logging
from typing import List, Iterable

from labscan.ingestion.parameters import Parameter

logger = logging.getLogger(__name__)

non_letter_re = re.compile(r"[^a-z]")


def similarity_key(name: str) -> str:
    return non_letter_re.sub("", (name or "").lower())


def are_similar(a: str, b: str) -> bool:
    """Names are similar when one letters-only, lowercased form contains the other.

    Known limitation: very short names (or names with no letters) collapse to
    short keys and can merge with unrelated parameters.
    """
    ka, kb = similarity_key(a), similarity_key(b)
    return ka in kb or kb in ka


def dedupe(records: Iterable[Parameter]) -> List[Parameter]:
    """
    Merge near-duplicate records, preferring the more complete one.

    Records are scanned in encounter order. An incoming record replaces the
    first similar accepted record only if it has a normal range and that one
    does not; otherwise the earlier record is kept. Output is sorted by name.
    """
    accepted: List[Parameter] = []
    for rec in records:
        idx = next((i for i, ex in enumerate(accepted) if are_similar(rec.name, ex.name)), None)
        if idx is None:
            accepted.append(rec)
            continue
        existing = accepted[idx]
        if rec.normal_range and not existing.normal_range:
            logger.debug(f"Replacing {existing.name!r} with {rec.name!r} (has normal range)")
            accepted[idx] = rec
        else:
            logger.debug(f"Dropping duplicate {rec.name!r} (kept {existing.name!r})")
    return sorted(accepted, key=lambda r: r.name)

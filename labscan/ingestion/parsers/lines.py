import re
import logging
from typing import List, Optional

from labscan.constants import NOISE_PREFIXES, MIN_LINE_LEN, MAX_LINE_LEN

logger = logging.getLogger(__name__)

# Longest prefixes first so "laboratory" is reported rather than "lab" in debug traces
_prefix_alt = "|".join(re.escape(p) for p in sorted(NOISE_PREFIXES, key=len, reverse=True))
NOISE_PATTERNS = [
    re.compile(rf"^(?:{_prefix_alt})", re.IGNORECASE),
    re.compile(r"^\d+/\d+/\d+"),   # dates
    re.compile(r"^\d{1,2}:\d{2}"),  # times
]


def noise_reason(line: str, patterns: Optional[List["re.Pattern"]] = None) -> Optional[str]:
    """Return why a (whitespace-normalized) line is structural noise, or None if it may hold data."""
    if len(line) < MIN_LINE_LEN:
        return "too short"
    if len(line) > MAX_LINE_LEN:
        return "too long"
    for pat in patterns if patterns is not None else NOISE_PATTERNS:
        m = pat.match(line)
        if m:
            return f"boilerplate '{m.group(0)}'"
    return None


def is_noise(line: str, patterns: Optional[List["re.Pattern"]] = None) -> bool:
    reason = noise_reason(line, patterns)
    if reason:
        logger.debug(f"Discarding line ({reason}): {line!r}")
        return True
    return False

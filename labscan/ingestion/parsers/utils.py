import re
from typing import List, Optional

# Common date patterns
DATE_PATTERNS = [
    re.compile(r"\b(\d{1,2})/(\d{1,2})/(20\d{2})\b"),  # MM/DD/YYYY
    re.compile(r"\b(20\d{2})-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])\b"),  # YYYY-MM-DD
    re.compile(r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\s+(\d{1,2}),\s*(20\d{2})\b", re.IGNORECASE),
]

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Labels that usually precede the date the sample was taken
PREFERRED_DATE_LABELS = [
    "Collection Date", "Collected", "Date Collected",
    "Sample Date", "Report Date", "Reported", "Received Date",
]

ws_re = re.compile(r"\s+")


def to_iso(y: int, m: int, d: int) -> str:
    return f"{y:04d}-{m:02d}-{d:02d}"


def normalize_line(line: str) -> str:
    """Trim and collapse internal whitespace runs to one space."""
    return ws_re.sub(" ", line.strip())


def split_lines(text: str) -> List[str]:
    """Split a text block into lines, keeping empty ones so indices match the source."""
    return (text or "").splitlines()


def _date_from_match(pat: "re.Pattern", m: "re.Match") -> Optional[str]:
    try:
        if pat is DATE_PATTERNS[0]:
            mm, dd, yyyy = int(m.group(1)), int(m.group(2)), int(m.group(3))
            return to_iso(yyyy, mm, dd)
        if pat is DATE_PATTERNS[1]:
            yyyy, mm, dd = int(m.group(1)), int(m.group(2)), int(m.group(3))
            return to_iso(yyyy, mm, dd)
        mon = MONTHS[m.group(1).lower()]
        dd, yyyy = int(m.group(2)), int(m.group(3))
        return to_iso(yyyy, mon, dd)
    except (KeyError, ValueError):
        return None


def extract_report_date(text: str) -> Optional[str]:
    """Return the report's ISO date, preferring labelled collection/report dates.

    Falls back to any date in the text (patterns tried in order); None if none.
    """
    if not text:
        return None

    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    for ln in lines:
        if any(lbl.lower() in ln.lower() for lbl in PREFERRED_DATE_LABELS):
            for pat in DATE_PATTERNS:
                m = pat.search(ln)
                if m:
                    iso = _date_from_match(pat, m)
                    if iso:
                        return iso

    # Fallback: first date anywhere
    for pat in DATE_PATTERNS:
        m = pat.search(text)
        if m:
            iso = _date_from_match(pat, m)
            if iso:
                return iso
    return None

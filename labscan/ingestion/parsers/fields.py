import re

name_junk_re = re.compile(r"[^\w\s\-/()]|_")
name_prefix_re = re.compile(r"^(?:test|lab|result|value)\s+", re.IGNORECASE)
range_prefix_re = re.compile(r"^(?:normal|reference|ref|range)\s*[:=]?\s*", re.IGNORECASE)
ws_re = re.compile(r"\s+")


def _fixed_point(fn, s: str) -> str:
    # Repeat a single cleanup pass until it stops changing the string
    prev = None
    while prev != s:
        prev = s
        s = fn(s)
    return s


def _clean_name_once(s: str) -> str:
    s = name_junk_re.sub("", s.strip())
    s = ws_re.sub(" ", s)
    s = name_prefix_re.sub("", s)
    return s.strip()


def _clean_range_once(s: str) -> str:
    return range_prefix_re.sub("", s.strip()).strip()


def clean_name(name: str) -> str:
    """Strip stray punctuation and boilerplate prefixes ("Test", "Lab", ...) from a parameter name."""
    return _fixed_point(_clean_name_once, name or "")


def clean_range(text: str) -> str:
    """Strip "Normal:", "Ref:", "Range:" style prefixes from a reference range."""
    return _fixed_point(_clean_range_once, text or "")

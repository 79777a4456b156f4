import re
import math
import logging
from typing import Optional

from labscan.constants import BP_SYSTOLIC_HIGH, BP_DIASTOLIC_HIGH, BP_SYSTOLIC_LOW, BP_DIASTOLIC_LOW

logger = logging.getLogger(__name__)

NUM = r"(\d+(?:\.\d+)?|\.\d+)"

compound_re = re.compile(r"(\d+)\s*/\s*(\d+)")
interval_re = re.compile(rf"{NUM}\s*[-–—]\s*{NUM}")
interval_to_re = re.compile(rf"{NUM}\s*to\s*{NUM}", re.IGNORECASE)
upper_re = re.compile(rf"<\s*(=?)\s*{NUM}")
lower_re = re.compile(rf">\s*(=?)\s*{NUM}")
open_min_re = re.compile(rf"{NUM}\s*\+")


def _safe_float(x) -> Optional[float]:
    try:
        if x is None:
            return None
        v = float(str(x).strip())
        if math.isnan(v) or math.isinf(v):
            return None
        return v
    except (TypeError, ValueError):
        return None


def compound_out_of_range(value: str) -> bool:
    """Systolic/diastolic check against fixed thresholds; malformed input is never out of range."""
    m = compound_re.search(value or "")
    if not m:
        return False
    systolic, diastolic = int(m.group(1)), int(m.group(2))
    high = systolic >= BP_SYSTOLIC_HIGH or diastolic >= BP_DIASTOLIC_HIGH
    low = systolic < BP_SYSTOLIC_LOW or diastolic < BP_DIASTOLIC_LOW
    return high or low


def is_out_of_range(value: str, normal_range: str) -> bool:
    """
    Return whether `value` falls outside `normal_range`.

    Total: any input pair yields a bool. Anything unparseable resolves to False.
    Range forms, tried in order: "A-B" / "A to B", "< A", "> A", "A+".
    """
    value = value if isinstance(value, str) else ("" if value is None else str(value))
    normal_range = normal_range if isinstance(normal_range, str) else ""

    if "/" in value:
        return compound_out_of_range(value)

    v = _safe_float(value)
    if v is None:
        return False
    rng = normal_range.strip()
    if not rng:
        return False

    for pat in (interval_re, interval_to_re):
        m = pat.search(rng)
        if m:
            lo, hi = _safe_float(m.group(1)), _safe_float(m.group(2))
            if lo is None or hi is None:
                return False
            return v < lo or v > hi

    m = upper_re.search(rng)
    if m:
        bound = _safe_float(m.group(2))
        if bound is None:
            return False
        return v > bound if m.group(1) else v >= bound

    m = lower_re.search(rng)
    if m:
        bound = _safe_float(m.group(2))
        if bound is None:
            return False
        return v < bound if m.group(1) else v <= bound

    m = open_min_re.search(rng)
    if m:
        bound = _safe_float(m.group(1))
        return bound is not None and v < bound

    logger.debug(f"Unrecognized range {normal_range!r}; treating {value!r} as in range")
    return False

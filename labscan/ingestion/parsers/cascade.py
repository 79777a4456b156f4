"""
Ordered template cascade that splits one report line into name/value/unit/range.

Templates are tried in priority order and the first one that matches wins; a
line is never parsed by two templates. The order is the tie-break policy: the
more specific shapes (explicit range straight after the unit) come first and the
permissive separator fallback comes last.
"""
from __future__ import annotations

import re
import logging
from typing import NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Building blocks
NUM_LEAD_OPT = r"[0-9]*\.?[0-9]+"   # "92", "4.5", ".5"
NUM_LEAD_REQ = r"[0-9]+\.?[0-9]*"   # "92", "4.5", "4."
UNIT = r"[a-zA-Zµμ/%]+"
SEP = r"\s*[:=\-]\s*"
PAREN_RANGE = r"\((?P<range>[^)]+)\)"


class Candidate(NamedTuple):
    raw_name: str
    raw_value: str
    raw_unit: str
    raw_range: str
    source_line_index: int


class Template(NamedTuple):
    name: str
    pattern: "re.Pattern"

    def match(self, line: str, index: int) -> Optional[Candidate]:
        m = self.pattern.match(line)
        if not m:
            return None
        groups = m.groupdict()
        return Candidate(
            raw_name=groups.get("name") or "",
            raw_value=groups.get("value") or "",
            raw_unit=groups.get("unit") or "",
            raw_range=groups.get("range") or "",
            source_line_index=index,
        )


def _t(name: str, pattern: str) -> Template:
    return Template(name, re.compile(pattern, re.IGNORECASE))


DEFAULT_TEMPLATES: Tuple[Template, ...] = (
    # 1. Glucose 92 mg/dL <100
    _t("unit_inequality",
       rf"^(?P<name>.+?)\s+(?P<value>{NUM_LEAD_OPT})\s+(?P<unit>{UNIT})\s+(?P<range>[<>]=?\s*{NUM_LEAD_OPT})"),
    # 2. Glucose 92 mg/dL 70-100
    _t("unit_interval",
       rf"^(?P<name>.+?)\s+(?P<value>{NUM_LEAD_OPT})\s+(?P<unit>{UNIT})\s+(?P<range>[0-9.]+\s*[-–]\s*[0-9.]+)"),
    # 3. Glucose: 92 mg/dL (70-100)  /  Glucose 92 mg/dL (70-100) H
    _t("separated_paren_range",
       rf"^(?P<name>.+?)(?:{SEP}|\s+)(?P<value>{NUM_LEAD_REQ})\s*(?P<unit>{UNIT})?\s*{PAREN_RANGE}"),
    # 4. Glucose: 92
    _t("separated_value",
       rf"^(?P<name>.+?){SEP}(?P<value>{NUM_LEAD_REQ})\s*$"),
    # 5. Glucose 92 mg/dL
    _t("value_unit",
       rf"^(?P<name>.+?)\s+(?P<value>{NUM_LEAD_REQ})\s+(?P<unit>{UNIT})\s*$"),
    # 6. Blood Pressure: 120/80 mmHg (90/60-120/80)
    _t("compound_value",
       rf"^(?P<name>.+?){SEP}(?P<value>[0-9]+/[0-9]+)\s*(?P<unit>{UNIT})?\s*(?:{PAREN_RANGE})?"),
    # 7. Glucose: .92 mg/dL ... anything
    _t("separated_fallback",
       rf"^(?P<name>.+?){SEP}(?P<value>{NUM_LEAD_OPT})\s*(?P<unit>{UNIT})?\s*(?:{PAREN_RANGE})?"),
)


def match_line(line: str, index: int = 0, templates: Optional[Sequence[Template]] = None) -> Optional[Candidate]:
    """Return the candidate from the first template matching `line`, or None."""
    for tpl in templates if templates is not None else DEFAULT_TEMPLATES:
        cand = tpl.match(line, index)
        if cand is not None:
            logger.debug(f"Line {index} matched template '{tpl.name}': {cand}")
            return cand
    logger.debug(f"Line {index} matched no template: {line!r}")
    return None

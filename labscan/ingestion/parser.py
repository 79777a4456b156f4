"""
Extraction pipeline: text block in, deduplicated and range-flagged parameters out.

    classify -> cascade match -> normalize -> validate -> categorize -> build -> dedupe

Every stage is a pure function over one line, so a run holds no state beyond
the configuration passed to the constructor.
"""
from __future__ import annotations

import hashlib
import logging
from datetime import datetime, UTC
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from labscan.constants import HEALTH_TERMS, CATEGORY_KEYWORDS
from labscan.ingestion.parameters import Parameter
from labscan.ingestion.parsers.cascade import Candidate, Template, DEFAULT_TEMPLATES, match_line
from labscan.ingestion.parsers.dedup import dedupe
from labscan.ingestion.parsers.fields import clean_name, clean_range
from labscan.ingestion.parsers.lines import is_noise
from labscan.ingestion.parsers.utils import normalize_line, split_lines, extract_report_date
from labscan.ingestion.parsers.validator import is_valid_parameter, categorize

logger = logging.getLogger(__name__)


class LabReportParser:
    """Owns the pipeline configuration; construct one per caller, no global instance."""

    def __init__(
        self,
        templates: Optional[Sequence[Template]] = None,
        terms: Optional[Dict[str, List[str]]] = None,
        categories: Optional[Sequence[Tuple[str, Iterable[str]]]] = None,
    ):
        self.templates = tuple(templates) if templates is not None else DEFAULT_TEMPLATES
        self.terms = terms if terms is not None else HEALTH_TERMS
        self.categories = list(categories) if categories is not None else CATEGORY_KEYWORDS

    def candidates(self, text: str) -> List[Candidate]:
        """Return one candidate per non-noise line that some template matches, in line order."""
        out: List[Candidate] = []
        for idx, raw in enumerate(split_lines(text)):
            line = normalize_line(raw)
            if not line or is_noise(line):
                continue
            cand = match_line(line, idx, self.templates)
            if cand is not None:
                out.append(cand)
        return out

    def build(self, cand: Candidate) -> Optional[Parameter]:
        """Normalize and validate a candidate; None if it is not a clinical parameter."""
        name = clean_name(cand.raw_name)
        value = cand.raw_value.strip()
        if not name or not value:
            return None
        if not is_valid_parameter(name, self.terms):
            return None
        return Parameter(
            id=f"param-{cand.source_line_index}",
            name=name,
            value=value,
            unit=cand.raw_unit.strip(),
            normal_range=clean_range(cand.raw_range),
            category=categorize(name, self.categories),
        )

    def parse(self, text: str) -> List[Parameter]:
        """Extract parameters from one document's text. An empty list is a valid result."""
        cands = self.candidates(text)
        built = [p for p in (self.build(c) for c in cands) if p is not None]
        params = dedupe(built)
        logger.info(f"Extracted {len(params)} parameters ({len(cands)} candidates, {len(built)} valid)")
        return params


def parse_health_parameters(text: str) -> List[Parameter]:
    """Convenience wrapper using the default configuration."""
    return LabReportParser().parse(text)


def _text_report_id(text: str) -> str:
    digest = hashlib.sha1((text or "").encode("utf-8", "replace")).hexdigest()
    return f"report-{digest[:12]}"


def parse_report(
    text: str,
    source: str = "",
    report_id: Optional[str] = None,
    parser: Optional[LabReportParser] = None,
) -> Dict:
    """Parse one document and wrap its parameters with report-level metadata.

    Without `report_id` or `source` the id is derived from a hash of `text`, so
    distinct documents get distinct ids and re-parsing the same text gives the same one.
    """
    params = (parser or LabReportParser()).parse(text)
    return {
        "report_id": report_id or source or _text_report_id(text),
        "source": source,
        "report_date": extract_report_date(text),
        "ingested_at": datetime.now(UTC).isoformat(timespec='seconds'),
        "parameters": params,
        "out_of_range_count": sum(1 for p in params if p.is_out_of_range),
    }

import argparse
import os
import glob
from typing import List, Dict, Optional
import pandas as pd
import logging

from dotenv import load_dotenv
load_dotenv()

from labscan.constants import (
    PARAMETER_COLS,
    REPORT_COLS,
    PARAMETERS_TABLE_FILE,
    REPORTS_TABLE_FILE,
    REPORT_SUFFIXES,
)
from labscan.ingestion.parser import LabReportParser, parse_report
from labscan.ingestion.utils_pdf import extract_text

logger = logging.getLogger(__name__)


def ensure_dirs(base_out: str):
    os.makedirs(os.path.join(base_out, "tables"), exist_ok=True)


def list_reports(src: str) -> List[str]:
    return sorted(
        fp for fp in glob.glob(os.path.join(src, "*"))
        if fp.lower().endswith(REPORT_SUFFIXES)
    )


def report_rows(report: Dict) -> List[Dict]:
    """Flatten a parsed report into parameter table rows."""
    rows = []
    for p in report["parameters"]:
        r = p.to_dict()
        r["report_id"] = report["report_id"]
        r["source"] = report["source"]
        r["report_date"] = report["report_date"]
        rows.append(r)
    return rows


def _write_table(rows: List[Dict], cols: List[str], path: str) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    # Ensure columns exist and keep schema order
    for col in cols:
        if col not in df.columns:
            df[col] = None
    df = df[cols]
    df.to_parquet(path)
    return df


def main(src: str, out: str, parser: Optional[LabReportParser] = None) -> Dict[str, int]:
    ensure_dirs(out)
    parser = parser or LabReportParser()
    param_rows: List[Dict] = []
    report_meta: List[Dict] = []

    for fp in list_reports(src):
        try:
            text = extract_text(fp)
        except Exception as e:
            logger.error(f"Failed to read {fp}: {e}")
            continue
        if not text.strip():
            logger.warning(f"No text extracted from {fp}")
            continue

        source = os.path.relpath(fp)
        report_id = os.path.splitext(os.path.basename(fp))[0]
        report = parse_report(text, source=source, report_id=report_id, parser=parser)
        logger.info(f"{source}: {len(report['parameters'])} parameters, {report['out_of_range_count']} out of range")
        param_rows.extend(report_rows(report))
        report_meta.append({
            "report_id": report_id,
            "source": source,
            "report_date": report["report_date"],
            "ingested_at": report["ingested_at"],
            "parameter_count": len(report["parameters"]),
            "out_of_range_count": report["out_of_range_count"],
        })

    if report_meta:
        rdf = _write_table(report_meta, REPORT_COLS, os.path.join(out, "tables", REPORTS_TABLE_FILE))
        logger.info(f"Wrote reports table: {len(rdf)} rows")
    else:
        logger.warning("No reports found or text extracted.")

    if param_rows:
        pdf = _write_table(param_rows, PARAMETER_COLS, os.path.join(out, "tables", PARAMETERS_TABLE_FILE))
        logger.info(f"Wrote parameters table: {len(pdf)} rows")
    else:
        logger.warning("No parameters parsed from any report.")

    return {"reports": len(report_meta), "parameters": len(param_rows)}


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Extract lab parameters from report PDFs/text dumps")
    default_src = os.path.join(os.getenv("DATA_DIR", "./data/raw"), "reports")
    parser.add_argument("--src", default=default_src)
    parser.add_argument("--out", default=os.getenv("PROCESSED_DIR", "./data/processed"))
    args = parser.parse_args()
    main(args.src, args.out)

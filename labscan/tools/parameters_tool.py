from typing import Optional, List, Dict
import os
import pandas as pd
import logging

from labscan.constants import PARAMETERS_TABLE_FILE, CATEGORIES, OTHER_CATEGORY

logger = logging.getLogger(__name__)


def _table_path(table_path: Optional[str] = None) -> str:
    # Resolved per call so PROCESSED_DIR changes (tests, CLI --out) are honoured
    return table_path or os.path.join(os.getenv("PROCESSED_DIR", "./data/processed"), "tables", PARAMETERS_TABLE_FILE)


def _load_df(table_path: Optional[str] = None) -> Optional[pd.DataFrame]:
    tp = _table_path(table_path)
    if not os.path.exists(tp):
        logger.warning(f'Parameters table not found at {tp}')
        return None
    try:
        df = pd.read_parquet(tp)
    except Exception as e:
        logger.error(f'Failed to load parameters table at {tp}: {e}')
        return None
    if df is None or df.empty:
        logger.warning(f'Parameters table is empty at {tp}')
        return None
    return df


def list_parameters(prefix: Optional[str] = None, table_path: Optional[str] = None) -> List[str]:
    """
    Return a list of all unique parameter names.

    Args:
        prefix: Optional prefix to filter names by (case-insensitive).
        table_path: Optional path to the parameters table.
    """
    df = _load_df(table_path)
    if df is None or "name" not in df.columns:
        return []
    names = [str(x) for x in df["name"].dropna().unique()]
    names.sort(key=lambda s: s.lower())
    if prefix:
        pl = prefix.lower()
        names = [n for n in names if n.lower().startswith(pl)]
    return names


def by_category(table_path: Optional[str] = None) -> Dict[str, List[str]]:
    """Group unique parameter names by category, in taxonomy order with "Other" last."""
    df = _load_df(table_path)
    if df is None or "category" not in df.columns:
        return {}
    order = CATEGORIES + [OTHER_CATEGORY]
    out: Dict[str, List[str]] = {}
    for cat in order:
        names = df.loc[df["category"] == cat, "name"].dropna().astype(str).unique().tolist()
        if names:
            out[cat] = sorted(names, key=lambda s: s.lower())
    unknown = set(df["category"].dropna().astype(str)) - set(order)
    if unknown:
        logger.warning(f'Parameters table has categories outside the taxonomy: {sorted(unknown)}')
    return out


def flagged(report_id: Optional[str] = None, table_path: Optional[str] = None) -> List[Dict]:
    """
    Return out-of-range parameter rows.

    Args:
        report_id: Restrict to one report.
        table_path: Optional path to the parameters table.
    """
    df = _load_df(table_path)
    if df is None or "is_out_of_range" not in df.columns:
        return []
    dff = df[df["is_out_of_range"].fillna(False).astype(bool)]
    if report_id is not None and "report_id" in dff.columns:
        dff = dff[dff["report_id"] == report_id]
    return dff.sort_values("name").to_dict(orient="records")


def history(name: str, ascending: bool = True, table_path: Optional[str] = None) -> List[Dict]:
    """
    Return every recorded value for a parameter, ordered by report date.

    Args:
        name: Parameter name, matched case-insensitively, e.g. "Blood Glucose".
        ascending: Sort order by date.
        table_path: Optional path to the parameters table.
    """
    df = _load_df(table_path)
    if df is None or "name" not in df.columns:
        return []
    dff = df[df["name"].str.lower() == name.lower()].copy()
    if dff.empty:
        logger.warning(f'No values found for {name}')
        return []
    if "report_date" in dff.columns:
        dff = dff.sort_values("report_date", ascending=ascending, na_position="first")
    cols = [c for c in ["report_date", "value", "unit", "normal_range", "is_out_of_range", "report_id", "source"] if c in dff.columns]
    return dff[cols].to_dict(orient="records")


def summary(table_path: Optional[str] = None) -> Optional[Dict]:
    """Return totals across all reports: parameter/report counts, flagged count, per-category counts."""
    df = _load_df(table_path)
    if df is None:
        return None
    flags = df["is_out_of_range"].fillna(False).astype(bool) if "is_out_of_range" in df.columns else pd.Series(dtype=bool)
    cats = df["category"].value_counts().to_dict() if "category" in df.columns else {}
    return {
        "parameters": int(len(df)),
        "reports": int(df["report_id"].nunique()) if "report_id" in df.columns else None,
        "out_of_range": int(flags.sum()),
        "by_category": {str(k): int(v) for k, v in cats.items()},
    }

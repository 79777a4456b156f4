"""
Centralized constants for the extraction pipeline and processed data schemas.
These constants are imported by the parsers, the ingestion script and the tools
so that the term dictionary, taxonomy and table schemas live in one place.
"""
from __future__ import annotations

from typing import List, Dict, Tuple

# Line classifier settings
# Lines starting with any of these (case-insensitive) are report boilerplate.
NOISE_PREFIXES: List[str] = [
    "page", "lab", "laboratory", "hospital", "clinic", "patient",
    "date", "time", "doctor", "physician",
    "report", "results", "summary", "conclusion", "notes", "remarks",
    "continued", "end of report", "thank you",
]
MIN_LINE_LEN: int = 3
MAX_LINE_LEN: int = 100

# Marker inserted between pages when a PDF is flattened to one text block
PAGE_MARKER: str = "--- Page {page} ---"

# Clinical term dictionary used by the domain validator, grouped by domain.
HEALTH_TERMS: Dict[str, List[str]] = {
    "blood_chemistry": [
        "glucose", "sugar", "hemoglobin", "hgb", "hb", "hba1c", "a1c",
        "cholesterol", "hdl", "ldl", "triglycerides", "lipid",
        "creatinine", "urea", "bun", "sodium", "potassium", "chloride",
        "protein", "albumin", "globulin", "bilirubin",
        "alt", "ast", "alp", "ggt", "liver", "enzyme",
        "wbc", "rbc", "platelet", "hematocrit", "mcv", "mch", "mchc",
        "esr", "crp", "inflammation",
    ],
    "vitals": [
        "blood pressure", "bp", "systolic", "diastolic", "pulse", "heart rate",
        "temperature", "temp", "oxygen", "o2", "saturation", "spo2",
        "weight", "height", "bmi", "body mass",
    ],
    "hormones": [
        "tsh", "thyroid", "t3", "t4", "insulin", "cortisol",
        "testosterone", "estrogen", "progesterone",
    ],
    "vitamins_minerals": [
        "vitamin", "b12", "d3", "folate", "iron", "ferritin",
        "calcium", "magnesium", "phosphorus", "zinc",
    ],
    "urine": [
        "urine", "urinalysis", "ketones", "specific gravity",
    ],
    "acid_base": [
        "ph", "co2", "bicarbonate", "anion gap",
    ],
}

# Category taxonomy. Order is significant: the first matching category wins
# because keyword sets overlap (e.g. "hb" vs "hba1c").
TAXONOMY_VERSION: str = "1"
CATEGORY_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("Blood Sugar", ["glucose", "sugar", "hba1c", "a1c", "diabetic"]),
    ("Lipid Profile", ["cholesterol", "hdl", "ldl", "triglycerides", "lipid"]),
    ("Blood Count", ["hemoglobin", "hgb", "hb", "wbc", "rbc", "platelet", "hematocrit", "mcv", "mch", "mchc"]),
    ("Kidney Function", ["creatinine", "urea", "bun", "kidney"]),
    ("Liver Function", ["alt", "ast", "alp", "ggt", "bilirubin", "liver"]),
    ("Electrolytes", ["sodium", "potassium", "chloride", "co2", "bicarbonate"]),
    ("Vital Signs", ["blood pressure", "bp", "heart rate", "pulse", "temperature", "oxygen", "spo2"]),
    ("Hormones", ["tsh", "thyroid", "t3", "t4", "insulin", "cortisol", "testosterone", "estrogen"]),
    ("Vitamins", ["vitamin", "b12", "d3", "folate"]),
    ("Minerals", ["iron", "ferritin", "calcium", "magnesium", "phosphorus", "zinc"]),
    ("Inflammation", ["esr", "crp", "inflammation"]),
    ("Proteins", ["protein", "albumin", "globulin"]),
]
CATEGORIES: List[str] = [c for c, _ in CATEGORY_KEYWORDS]
OTHER_CATEGORY: str = "Other"

# Compound (systolic/diastolic) thresholds
BP_SYSTOLIC_HIGH: int = 140
BP_DIASTOLIC_HIGH: int = 90
BP_SYSTOLIC_LOW: int = 90
BP_DIASTOLIC_LOW: int = 60

# Parameters processed table schema
# One row per extracted parameter, tagged with the report it came from.
PARAMETER_COLS: List[str] = [
    "id",
    "name",
    "value",
    "unit",
    "normal_range",
    "category",
    "is_out_of_range",
    "report_id",
    "source",
    "report_date",
]

# Reports processed table schema
REPORT_COLS: List[str] = [
    "report_id",
    "source",
    "report_date",
    "ingested_at",
    "parameter_count",
    "out_of_range_count",
]

PARAMETERS_TABLE_FILE: str = "parameters.parquet"
REPORTS_TABLE_FILE: str = "reports.parquet"

# Supported raw report file types
REPORT_SUFFIXES: Tuple[str, ...] = (".pdf", ".txt")

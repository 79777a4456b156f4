import pytest

from labscan.constants import CATEGORIES, OTHER_CATEGORY
from labscan.ingestion.parameters import Parameter
from labscan.ingestion.parsers.cascade import DEFAULT_TEMPLATES, match_line
from labscan.ingestion.parsers.dedup import dedupe, are_similar
from labscan.ingestion.parsers.fields import clean_name, clean_range
from labscan.ingestion.parsers.lines import is_noise
from labscan.ingestion.parsers.ranges import is_out_of_range
from labscan.ingestion.parsers.utils import extract_report_date
from labscan.ingestion.parsers.validator import is_valid_parameter, is_initialism, categorize


# --- Line classifier ---

@pytest.mark.parametrize("line", [
    "Page 1 of 3",
    "Laboratory Services",
    "PATIENT NAME: Jane Doe",
    "12/03/2024 collected",
    "09:15 AM",
    "End of report",
    "Thank you for choosing us",
    "ab",
    "x" * 101,
])
def test_noise_lines_are_discarded(line):
    assert is_noise(line)


@pytest.mark.parametrize("line", [
    "Blood Glucose 92 mg/dL (70-100)",
    "Hemoglobin: 13.5",
    "--- Page 2 ---",
])
def test_data_lines_are_kept(line):
    assert not is_noise(line)


def test_empty_pattern_list_disables_boilerplate_rules():
    assert not is_noise("Page 1 of 3", patterns=[])
    # length rules still apply
    assert is_noise("ab", patterns=[])
    assert is_noise("x" * 101, patterns=[])


# --- Pattern cascade ---

def test_unit_inequality_wins_over_value_unit():
    line = "Glucose 92 mg/dL < 100 mg/dL"
    # The end-anchored value/unit template would also read this line, differently
    assert DEFAULT_TEMPLATES[4].match(line, 0) is not None
    cand = match_line(line, 3)
    assert (cand.raw_name, cand.raw_value, cand.raw_unit, cand.raw_range) == ("Glucose", "92", "mg/dL", "< 100")
    assert cand.source_line_index == 3


@pytest.mark.parametrize("line, expected", [
    ("Hemoglobin 13.5 g/dL 12.0-15.5", ("Hemoglobin", "13.5", "g/dL", "12.0-15.5")),
    ("Blood Glucose 92 mg/dL (70-100)", ("Blood Glucose", "92", "mg/dL", "70-100")),
    ("Total Cholesterol: 210 mg/dL (< 200)", ("Total Cholesterol", "210", "mg/dL", "< 200")),
    ("Vitamin B-12: 400 pg/mL (200-900)", ("Vitamin B-12", "400", "pg/mL", "200-900")),
    ("Hemoglobin: 13.5", ("Hemoglobin", "13.5", "", "")),
    ("Hemoglobin 13.5 g/dL", ("Hemoglobin", "13.5", "g/dL", "")),
    ("Blood Pressure: 150/95 mmHg", ("Blood Pressure", "150/95", "mmHg", "")),
    ("Ferritin: .8 ng/mL H", ("Ferritin", ".8", "ng/mL", "")),
    ("Hemoglobin 11.0 g/dL (12.0-15.5) L", ("Hemoglobin", "11.0", "g/dL", "12.0-15.5")),
    ("Blood Glucose 150 mg/dL (70-100) H", ("Blood Glucose", "150", "mg/dL", "70-100")),
])
def test_cascade_fields(line, expected):
    cand = match_line(line)
    assert cand is not None
    assert (cand.raw_name, cand.raw_value, cand.raw_unit, cand.raw_range) == expected


@pytest.mark.parametrize("line", ["Comments: see attached", "--- Page 1 ---", "Fasting required"])
def test_cascade_no_match(line):
    assert match_line(line) is None


def test_hyphenated_name_without_separator_splits_at_hyphen():
    # Known limitation: with no ":" the hyphen in "B-12" is taken as the separator
    cand = match_line("Vitamin B-12 400 pg/mL H")
    assert (cand.raw_name, cand.raw_value) == ("Vitamin B", "12")


# --- Field normalizer ---

@pytest.mark.parametrize("raw, expected", [
    ("  Test:  Hemoglobin   A1c* ", "Hemoglobin A1c"),
    ("Result Lab Glucose", "Glucose"),
    ("Heart Rate:", "Heart Rate"),
    ("Value", "Value"),
    ("T3 (Free)", "T3 (Free)"),
])
def test_clean_name(raw, expected):
    assert clean_name(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("Normal Range: 70-100", "70-100"),
    ("Ref: < 200", "< 200"),
    ("reference 3.5-5.0", "3.5-5.0"),
    ("  range=60+ ", "60+"),
    ("", ""),
])
def test_clean_range(raw, expected):
    assert clean_range(raw) == expected


@pytest.mark.parametrize("s", [
    "Test Lab Result Value Glucose", "  **Hb**  ", "Normal Normal: ref = range 1-2",
    "Value", "lab\tlab  test", "", "()-/", "Range: Ref: 5", "test test",
])
def test_cleaners_are_idempotent(s):
    assert clean_name(clean_name(s)) == clean_name(s)
    assert clean_range(clean_range(s)) == clean_range(s)


# --- Domain validator & categorizer ---

@pytest.mark.parametrize("name", ["Blood Glucose", "Hemoglo", "TSH", "SG", "Specific Gravity"])
def test_valid_parameters(name):
    assert is_valid_parameter(name)


@pytest.mark.parametrize("name", ["Invoice Number", "Signature", ""])
def test_invalid_parameters(name):
    assert not is_valid_parameter(name)


def test_initialism_requires_multi_word_term():
    assert is_initialism("sg", "specific gravity")
    assert not is_initialism("g", "glucose")
    assert not is_initialism("sgxyzw", "specific gravity")


def test_validator_accepts_custom_terms():
    assert is_valid_parameter("Troponin", {"cardiac": ["troponin"]})
    assert not is_valid_parameter("Glucose", {"cardiac": ["troponin"]})


@pytest.mark.parametrize("name, category", [
    ("Blood Glucose", "Blood Sugar"),
    ("HbA1c", "Blood Sugar"),
    ("WBC CRP", "Blood Count"),
    ("ESR", "Inflammation"),
    ("Blood Pressure", "Vital Signs"),
    ("Total Cholesterol", "Lipid Profile"),
    ("Signature", OTHER_CATEGORY),
])
def test_categorize(name, category):
    assert categorize(name) == category


def test_taxonomy_is_closed():
    assert len(CATEGORIES) == 12
    assert OTHER_CATEGORY not in CATEGORIES


# --- Range evaluator ---

@pytest.mark.parametrize("value, rng, expected", [
    ("92", "70-100", False),
    ("69.9", "70-100", True),
    ("5.2", "4.0–5.5", False),
    ("101", "70 to 100", True),
    ("210", "< 200", True),
    ("200", "<200", True),
    ("199", "<200", False),
    ("200", "<= 200", False),
    ("40", "> 40", True),
    ("41", ">40", False),
    ("40", ">= 40", False),
    ("59", "60+", True),
    ("60", "60+", False),
    ("150/95", "", True),
    ("120/80", "", False),
    ("85/70", "", True),
    ("120/95", "90-140", True),
    ("abc/def", "", False),
    ("abc", "70-100", False),
    ("92", "", False),
    ("92", "see note", False),
])
def test_is_out_of_range(value, rng, expected):
    assert is_out_of_range(value, rng) is expected


@pytest.mark.parametrize("value, rng", [
    ("", ""), ("/", "/"), ("1e999", "1-2"), (".", "."), ("-", "--"),
    ("120/", "<"), ("+", "+"), ("nan", "<5"), (None, None), ("12", "..-..")
])
def test_is_out_of_range_is_total(value, rng):
    assert is_out_of_range(value, rng) is False


# --- Deduplicator ---

def test_dedupe_prefers_record_with_range():
    a = Parameter(id="param-0", name="Glucose", value="92")
    b = Parameter(id="param-1", name="glucose", value="95", normal_range="70-100")
    out = dedupe([a, b])
    assert len(out) == 1
    assert out[0].id == "param-1"
    assert out[0].normal_range == "70-100"


def test_dedupe_tie_keeps_earlier():
    a = Parameter(id="param-0", name="Glucose", value="92", normal_range="70-100")
    b = Parameter(id="param-1", name="Fasting Glucose", value="95", normal_range="70-99")
    assert [p.id for p in dedupe([a, b])] == ["param-0"]


def test_dedupe_sorts_by_name_case_sensitive():
    recs = [Parameter(id=f"p{i}", name=n, value="1") for i, n in enumerate(["Sodium", "calcium", "Albumin"])]
    assert [p.name for p in dedupe(recs)] == ["Albumin", "Sodium", "calcium"]


def test_similarity_is_a_containment_heuristic():
    assert are_similar("Vitamin B-12", "vitamin b")
    # Known limitation: a panel name and its sub-test collapse together
    assert are_similar("Hemoglobin", "Hemoglobin A1c")
    assert not are_similar("Sodium", "Potassium")


# --- Report date ---

@pytest.mark.parametrize("text, expected", [
    ("Printed 01/02/2024\nCollection Date: 03/14/2024", "2024-03-14"),
    ("Reported: 2023-11-05", "2023-11-05"),
    ("Sample taken Sept 7, 2022", "2022-09-07"),
    ("no dates here", None),
])
def test_extract_report_date(text, expected):
    assert extract_report_date(text) == expected


def main(argv=None):
    import sys
    import pytest as _pytest
    from pathlib import Path as _Path
    test_path = str(_Path(__file__).resolve())
    opts = [test_path]
    rc = _pytest.main(opts if argv is None else argv + [test_path])
    sys.exit(rc)


if __name__ == "__main__":
    main()

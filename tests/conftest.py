import os
import sys
from pathlib import Path
import pytest

# Ensure project root is on sys.path so `import labscan...` works when running pytest from repo root
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Load environment variables if present
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

# Ensure PROCESSED_DIR defaults to repo's data/processed if not set
os.environ.setdefault("PROCESSED_DIR", str(ROOT / "data/processed"))


# Pytest configuration: PDF round-trip tests are enabled by default; allow disabling with --no-pdf
def pytest_addoption(parser):
    parser.addoption(
        "--no-pdf",
        action="store_true",
        default=False,
        help="Disable tests that build and read real PDFs with PyMuPDF",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "pdf: marks tests that write and read PDF files")


def pytest_collection_modifyitems(config, items):
    if not items:
        return
    if config.getoption("--no-pdf"):
        skip_pdf = pytest.mark.skip(reason="pdf tests disabled via --no-pdf")
        for item in items:
            if item.get_closest_marker("pdf") is not None:
                item.add_marker(skip_pdf)

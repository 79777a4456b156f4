import os
import fitz  # PyMuPDF
from typing import List, Dict

from labscan.constants import PAGE_MARKER


def extract_pdf_pages(pdf_path: str) -> List[Dict]:
    """Extract text by page with basic metadata."""
    out = []
    with fitz.open(pdf_path) as doc:
        for i, page in enumerate(doc, start=1):
            text = page.get_text("text") or ""
            out.append({"page": i, "text": text})
    return out


def join_pages(pages: List[Dict]) -> str:
    """Flatten pages into one block, separating them with page markers. Blank pages are skipped."""
    parts = []
    for p in pages:
        text = (p.get("text") or "").strip()
        if text:
            parts.append(f"{PAGE_MARKER.format(page=p.get('page'))}\n{text}")
    return "\n".join(parts)


def extract_text(path: str) -> str:
    """Return the full text of a report file (.pdf or .txt)."""
    lower = path.lower()
    if lower.endswith(".pdf"):
        return join_pages(extract_pdf_pages(path))
    if lower.endswith(".txt"):
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    raise ValueError("Unsupported file type: " + os.path.basename(path))

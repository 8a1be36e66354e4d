# quote_finder/infrastructure/pdf_extractor.py

import io
import threading
from typing import List

from quote_finder.domain.interfaces import DocumentExtractorPort
from quote_finder.domain.models import PdfExtraction


SCANNED_CHARS_PER_PAGE = 500

# PyMuPDF is not thread-safe. Every call into it, from any worker thread, holds this lock.
PYMUPDF_LOCK = threading.Lock()


class PdfTextExtractor(DocumentExtractorPort):
    """
    Pulls the text layer out of a PDF held in memory.

    pdfplumber is tried first; PyMuPDF takes over when pdfplumber is not
    installed or cannot open the file. Page text is joined with single
    spaces. Pages without a text layer still count toward the page total,
    which is what lets callers spot scanned documents.
    """

    def __init__(self, scanned_chars_per_page: int = SCANNED_CHARS_PER_PAGE):
        self._scanned_chars_per_page = scanned_chars_per_page

    def extract(self, data: bytes) -> PdfExtraction:
        if not data:
            raise ValueError("PDF data is empty.")

        pages = self._extract_pages_pdfplumber(data)
        if pages is None:
            pages = self._extract_pages_pymupdf(data)
        if pages is None:
            raise ValueError("PDF parsing failed.")

        text = " ".join(page.strip() for page in pages if page and page.strip())
        print(f"[PdfExtractor] Extracted {len(text)} chars from {len(pages)} pages.")
        return PdfExtraction(
            page_count=len(pages),
            text=text,
            scanned_threshold=self._scanned_chars_per_page,
        )

    # ─── Private: PDF Backends ────────────────────────────────────────────────

    def _extract_pages_pdfplumber(self, data: bytes) -> List[str] | None:
        try:
            import pdfplumber
        except ImportError:
            return None
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                return [
                    page.extract_text(x_tolerance=2, y_tolerance=2) or ""
                    for page in pdf.pages
                ]
        except Exception as error:
            print(f"[PdfExtractor] pdfplumber error: {error}")
            return None

    def _extract_pages_pymupdf(self, data: bytes) -> List[str] | None:
        try:
            import fitz
        except ImportError:
            return None
        try:
            with PYMUPDF_LOCK, fitz.open(stream=data, filetype="pdf") as pdf:
                return [page.get_text() or "" for page in pdf]
        except Exception as error:
            print(f"[PdfExtractor] PyMuPDF error: {error}")
            return None

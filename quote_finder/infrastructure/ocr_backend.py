# quote_finder/infrastructure/ocr_backend.py

import io
from typing import List

import fitz
import pytesseract
from PIL import Image

from quote_finder.domain.interfaces import OCRPort
from quote_finder.infrastructure.pdf_extractor import PYMUPDF_LOCK


DEFAULT_LANGUAGE = "eng"
DEFAULT_DPI = 200


class TesseractOCRBackend(OCRPort):
    """
    Renders PDF pages with PyMuPDF and recognizes them with Tesseract.

    Rendering is serialized through PYMUPDF_LOCK; only the Tesseract work
    runs in parallel when page groups are processed from several worker
    threads. Requires the Tesseract binary on the host.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE, dpi: int = DEFAULT_DPI):
        self._language = language
        self._dpi = dpi

    def extract_pages(self, data: bytes, pages: List[int]) -> str:
        texts = []
        for png in self.render_pages(data, pages):
            image = Image.open(io.BytesIO(png))
            texts.append(pytesseract.image_to_string(image, lang=self._language))
        return " ".join(texts)

    def render_pages(self, data: bytes, pages: List[int]) -> List[bytes]:
        """PNG bytes for the given 1-based pages."""
        rendered = []
        with PYMUPDF_LOCK, fitz.open(stream=data, filetype="pdf") as pdf:
            for page_number in pages:
                if not 1 <= page_number <= pdf.page_count:
                    raise ValueError(
                        f"Page {page_number} out of range (document has {pdf.page_count} pages)."
                    )
                pixmap = pdf[page_number - 1].get_pixmap(dpi=self._dpi)
                rendered.append(pixmap.tobytes("png"))
        return rendered

    @staticmethod
    def is_available() -> bool:
        """True when the Tesseract binary can be found."""
        try:
            pytesseract.get_tesseract_version()
            return True
        except pytesseract.TesseractNotFoundError:
            return False

# tests/test_ocr_backend.py

from concurrent.futures import ThreadPoolExecutor

import fitz
import pytest

from quote_finder.infrastructure import ocr_backend
from quote_finder.infrastructure.ocr_backend import TesseractOCRBackend
from quote_finder.infrastructure.pdf_extractor import PYMUPDF_LOCK


# ── Fixtures ──────────────────────────────────────────────────────────────────

def _make_pdf(page_count: int) -> bytes:
    doc = fitz.Document()
    for i in range(page_count):
        doc.new_page().insert_text((72, 72), f"Page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def lock_states(monkeypatch):
    """Records whether the PyMuPDF lock was held at each open and each recognition."""
    states = {"open": [], "recognize": []}
    real_open = fitz.open

    def tracking_open(*args, **kwargs):
        states["open"].append(PYMUPDF_LOCK.locked())
        return real_open(*args, **kwargs)

    def fake_image_to_string(image, lang=None):
        states["recognize"].append(PYMUPDF_LOCK.locked())
        return f"{image.width}x{image.height}"

    monkeypatch.setattr(ocr_backend.fitz, "open", tracking_open)
    monkeypatch.setattr(ocr_backend.pytesseract, "image_to_string", fake_image_to_string)
    return states


# ── Tests ─────────────────────────────────────────────────────────────────────

def test_rendering_holds_the_lock_and_recognition_does_not(lock_states):
    data = _make_pdf(3)

    TesseractOCRBackend(dpi=72).extract_pages(data, [1, 2, 3])

    assert lock_states["open"] == [True]
    assert lock_states["recognize"] == [False, False, False]


def test_concurrent_groups_all_complete(lock_states):
    data = _make_pdf(10)
    backend = TesseractOCRBackend(dpi=72)
    groups = [[1, 2, 3, 4, 5], [6, 7, 8, 9, 10]] * 4

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda pages: backend.extract_pages(data, pages), groups))

    assert all(len(text.split(" ")) == 5 for text in results)
    assert all(lock_states["open"])
    assert not PYMUPDF_LOCK.locked()


def test_render_returns_png_per_page():
    pngs = TesseractOCRBackend(dpi=72).render_pages(_make_pdf(2), [2, 1])

    assert len(pngs) == 2
    assert all(png.startswith(b"\x89PNG") for png in pngs)


def test_out_of_range_page_is_rejected_and_lock_released():
    with pytest.raises(ValueError):
        TesseractOCRBackend(dpi=72).render_pages(_make_pdf(2), [3])

    assert not PYMUPDF_LOCK.locked()

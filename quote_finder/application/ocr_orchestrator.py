# quote_finder/application/ocr_orchestrator.py

import asyncio
import re
from typing import List, Optional, Tuple

from quote_finder.domain.errors import OCRGroupFailure, OCRUnavailable
from quote_finder.domain.interfaces import OCRPort
from quote_finder.infrastructure.content_cache import ContentCache


# Vendor limit on pages per OCR request.
PAGES_PER_REQUEST = 5

_WHITESPACE = re.compile(r"\s+")


def partition_pages(page_count: int, pages_per_request: int = PAGES_PER_REQUEST) -> List[List[int]]:
    """Split pages 1..page_count into contiguous groups of at most pages_per_request."""
    if pages_per_request < 1:
        raise ValueError("Pages per request must be at least 1.")
    return [
        list(range(first, min(first + pages_per_request, page_count + 1)))
        for first in range(1, page_count + 1, pages_per_request)
    ]


class OCROrchestrator:
    """
    Fan-out / fan-in OCR over a multi-page document.

    One backend request per page group, all in flight at once; nothing is
    consumed until every group has returned. Results are reassembled by
    group index, never by completion order. A single failed group fails
    the whole run: partial text is never returned.

    The recognized text is whitespace-collapsed and cached with is_ocr=True.
    """

    def __init__(
        self,
        backend: Optional[OCRPort],
        cache: ContentCache,
        pages_per_request: int = PAGES_PER_REQUEST,
    ):
        if pages_per_request < 1:
            raise ValueError("Pages per request must be at least 1.")
        self._backend = backend
        self._cache = cache
        self._pages_per_request = pages_per_request

    @property
    def is_available(self) -> bool:
        return self._backend is not None

    async def run(self, data: bytes, page_count: int, key: str) -> str:
        if self._backend is None:
            raise OCRUnavailable("OCR is not configured. Set OCR_ENABLED and install Tesseract.")
        if page_count < 1:
            raise ValueError("Page count must be at least 1.")

        groups = partition_pages(page_count, self._pages_per_request)
        print(f"[OCR] Processing {page_count} pages in {len(groups)} concurrent requests...")

        results = await asyncio.gather(
            *(self._recognize_group(data, index, pages) for index, pages in enumerate(groups)),
            return_exceptions=True,
        )

        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                raise OCRGroupFailure(index, groups[index], str(result)) from result

        ordered = sorted(results, key=lambda item: item[0])
        text = _WHITESPACE.sub(" ", " ".join(chunk for _, chunk in ordered)).strip()

        self._cache.put(key, text, is_ocr=True)
        print(f"[OCR] Recognized {len(text)} chars; cached as '{key}'.")
        return text

    async def _recognize_group(self, data: bytes, index: int, pages: List[int]) -> Tuple[int, str]:
        text = await asyncio.to_thread(self._backend.extract_pages, data, pages)
        return index, text or ""

# quote_finder/application/document_service.py

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple

from quote_finder.application.ocr_orchestrator import OCROrchestrator
from quote_finder.domain.errors import DocumentTooLargeForOCR
from quote_finder.domain.interfaces import DocumentExtractorPort
from quote_finder.domain.models import IngestResult, Segment
from quote_finder.infrastructure.content_cache import ContentCache
from quote_finder.infrastructure.document_fetcher import DocumentFetcher
from quote_finder.infrastructure.document_hasher import compute_document_key
from quote_finder.infrastructure.segment_server import SegmentServer


OCR_MAX_PAGES = 30
DEFAULT_PDF_TITLE = "PDF Document"


@dataclass
class PdfIngestResult:
    ingest: IngestResult
    title: str
    page_count: int
    looks_scanned: bool


class DocumentService:
    """
    Turns a source document into text the ranking pipeline can consume.

    PDF flow:
        1. fetch bytes (URL, file:// path or inline base64)
        2. extract the text layer
        3. scanned-looking documents go through OCR (cached OCR text is reused)
        4. hand the text to the segment server, which caches it when oversized

    Blocking work (download, parsing) runs in worker threads so the OCR
    fan-out and the request timeout stay responsive.
    """

    def __init__(
        self,
        extractor: DocumentExtractorPort,
        fetcher: DocumentFetcher,
        ocr: OCROrchestrator,
        cache: ContentCache,
        segments: SegmentServer,
        ocr_max_pages: int = OCR_MAX_PAGES,
    ):
        self._extractor = extractor
        self._fetcher = fetcher
        self._ocr = ocr
        self._cache = cache
        self._segments = segments
        self._ocr_max_pages = ocr_max_pages

    # ─── Plain text ───────────────────────────────────────────────────────────

    def ingest_text(
        self,
        content: str,
        url: Optional[str] = None,
        title: Optional[str] = None,
        is_ocr: bool = False,
    ) -> IngestResult:
        if not content:
            raise ValueError("Content is required.")
        key = compute_document_key(url, title, content)
        return self._segments.ingest(key, content, is_ocr)

    def fetch_segment(self, key: str, index: int) -> Tuple[Segment, str, bool]:
        return self._segments.fetch_segment(key, index)

    # ─── PDF ──────────────────────────────────────────────────────────────────

    async def extract_pdf(
        self,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        title: Optional[str] = None,
    ) -> PdfIngestResult:
        if data is None:
            if not url:
                raise ValueError("URL or document data is required.")
            data = await asyncio.to_thread(self._fetcher.fetch, url)

        key = compute_document_key(url, title, data)
        extraction = await asyncio.to_thread(self._extractor.extract, data)
        text = extraction.text
        is_ocr = False

        if extraction.looks_scanned:
            print(
                f"[DocumentService] '{key}' looks scanned "
                f"({extraction.avg_chars_per_page:.0f} chars/page over {extraction.page_count} pages)."
            )
            cached = self._cache.get(key)
            if cached is not None and cached.is_ocr:
                text = cached.content
            else:
                if extraction.page_count > self._ocr_max_pages:
                    raise DocumentTooLargeForOCR(
                        extraction.page_count, self._ocr_max_pages, extraction.text
                    )
                text = await self._ocr.run(data, extraction.page_count, key)
            is_ocr = True

        return PdfIngestResult(
            ingest=self._segments.ingest(key, text, is_ocr),
            title=title or DEFAULT_PDF_TITLE,
            page_count=extraction.page_count,
            looks_scanned=extraction.looks_scanned,
        )

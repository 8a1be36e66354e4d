# quote_finder/bootstrap.py

from dataclasses import dataclass
from typing import Optional

from quote_finder.application.document_service import DocumentService
from quote_finder.application.ocr_orchestrator import OCROrchestrator
from quote_finder.application.quote_service import QuoteRankingService
from quote_finder.domain.interfaces import OCRPort, RefinementPort
from quote_finder.infrastructure.content_cache import ContentCache
from quote_finder.infrastructure.document_fetcher import DocumentFetcher
from quote_finder.infrastructure.fuzzy_search import LevenshteinFuzzySearch
from quote_finder.infrastructure.pdf_extractor import PdfTextExtractor
from quote_finder.infrastructure.refinement_client import EchoRefinementClient, OpenAIRefinementClient
from quote_finder.infrastructure.request_log import RequestLog
from quote_finder.infrastructure.segment_server import SegmentServer
from quote_finder.settings import Settings


@dataclass
class QuoteFinderServices:
    """Everything one process needs; owns the content cache."""
    settings: Settings
    cache: ContentCache
    segments: SegmentServer
    ranking: QuoteRankingService
    documents: DocumentService
    ocr: OCROrchestrator
    refiner: RefinementPort
    request_log: RequestLog

    def close(self) -> None:
        self.cache.clear()


def build_refiner(settings: Settings) -> RefinementPort:
    if settings.OPENAI_API_KEY:
        return OpenAIRefinementClient(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            temperature=settings.REFINEMENT_TEMPERATURE,
        )
    print("[Bootstrap] OPENAI_API_KEY not set — using the offline echo refiner.")
    return EchoRefinementClient()


def build_ocr_backend(settings: Settings) -> Optional[OCRPort]:
    if not settings.OCR_ENABLED:
        return None

    from quote_finder.infrastructure.ocr_backend import TesseractOCRBackend

    if not TesseractOCRBackend.is_available():
        print("[Bootstrap] ⚠ Tesseract binary not found. OCR will not be available.")
        return None
    return TesseractOCRBackend(language=settings.OCR_LANGUAGE)


def build_services(
    settings: Optional[Settings] = None,
    refiner: Optional[RefinementPort] = None,
    ocr_backend: Optional[OCRPort] = None,
) -> QuoteFinderServices:
    """
    Composition root. Explicit `refiner` / `ocr_backend` arguments replace the
    ones derived from settings (tests pass fakes here).
    """
    settings = settings or Settings()

    cache = ContentCache(
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        max_size=settings.MAX_CACHE_SIZE,
    )
    segments = SegmentServer(cache, segment_size=settings.SEGMENT_SIZE)
    refiner = refiner or build_refiner(settings)

    ranking = QuoteRankingService(
        fuzzy_search=LevenshteinFuzzySearch(threshold=settings.FUZZY_THRESHOLD),
        refiner=refiner,
        max_content_chars=settings.MAX_CONTENT_CHARS,
        max_selected=settings.MAX_SELECTED_SENTENCES,
    )

    ocr = OCROrchestrator(
        backend=ocr_backend if ocr_backend is not None else build_ocr_backend(settings),
        cache=cache,
        pages_per_request=settings.OCR_PAGES_PER_REQUEST,
    )

    documents = DocumentService(
        extractor=PdfTextExtractor(scanned_chars_per_page=settings.SCANNED_CHARS_PER_PAGE),
        fetcher=DocumentFetcher(),
        ocr=ocr,
        cache=cache,
        segments=segments,
        ocr_max_pages=settings.OCR_MAX_PAGES,
    )

    return QuoteFinderServices(
        settings=settings,
        cache=cache,
        segments=segments,
        ranking=ranking,
        documents=documents,
        ocr=ocr,
        refiner=refiner,
        request_log=RequestLog(settings.STORAGE_DIR),
    )

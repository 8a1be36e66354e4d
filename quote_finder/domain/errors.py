# quote_finder/domain/errors.py

from typing import List, Optional


class QuoteFinderError(Exception):
    """Base class for failures the caller is expected to handle."""


class CacheMiss(QuoteFinderError):
    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(
            message or f"Content for '{key}' not found in cache. Please re-ingest the document."
        )
        self.key = key


class SegmentNotFound(CacheMiss):
    def __init__(self, key: str, index: int, reason: str = "not cached"):
        super().__init__(key, f"Segment {index} of '{key}' unavailable: {reason}.")
        self.index = index


class OCRUnavailable(QuoteFinderError):
    def __init__(self, message: str = "OCR backend is not configured."):
        super().__init__(message)


class OCRGroupFailure(QuoteFinderError):
    """One page-group request failed, so the whole OCR run is void."""

    def __init__(self, group_index: int, pages: List[int], reason: str):
        super().__init__(
            f"OCR failed for page group {group_index} "
            f"(pages {pages[0]}-{pages[-1]}): {reason}"
        )
        self.group_index = group_index
        self.pages = pages


class DocumentTooLargeForOCR(QuoteFinderError):
    def __init__(self, page_count: int, limit: int, extracted_text: str = ""):
        super().__init__(
            f"This PDF appears to be scanned (image-based) and has {page_count} pages. "
            f"OCR processing is limited to {limit} pages. Please use a text-based "
            f"version of this PDF, or select a specific section to analyze."
        )
        self.page_count = page_count
        self.limit = limit
        self.extracted_text = extracted_text


class RefinementParseFailure(QuoteFinderError):
    """The model answered with something that is not a usable JSON quote list."""


class RefinementUnavailable(QuoteFinderError):
    """The refinement model could not be reached at all."""


class DocumentFetchError(QuoteFinderError):
    """The source document could not be downloaded or read."""

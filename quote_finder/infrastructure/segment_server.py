# quote_finder/infrastructure/segment_server.py

import math
from typing import List, Tuple

from quote_finder.domain.errors import SegmentNotFound
from quote_finder.domain.models import IngestResult, Segment
from quote_finder.infrastructure.content_cache import ContentCache


SEGMENT_SIZE = 50000


def compute_segments(length: int, segment_size: int = SEGMENT_SIZE) -> List[Segment]:
    """Fixed-size, non-overlapping half-open ranges covering [0, length)."""
    if segment_size < 1:
        raise ValueError("Segment size must be at least 1.")
    count = math.ceil(length / segment_size)
    return [
        Segment(index=i, start=i * segment_size, end=min((i + 1) * segment_size, length))
        for i in range(count)
    ]


class SegmentServer:
    """
    Serves oversized documents one fixed-size window at a time.

    The segmentation decision is taken once, at ingestion:
    - content longer than `segment_size` is cached in full and only its
      segment layout is returned
    - anything smaller is handed straight back and never cached

    Segment boundaries are recomputed from the cached content on each fetch;
    they are never stored.
    """

    def __init__(self, cache: ContentCache, segment_size: int = SEGMENT_SIZE):
        if segment_size < 1:
            raise ValueError("Segment size must be at least 1.")
        self._cache = cache
        self._segment_size = segment_size

    @property
    def segment_size(self) -> int:
        return self._segment_size

    def ingest(self, key: str, text: str, is_ocr: bool = False) -> IngestResult:
        text = text or ""
        if len(text) <= self._segment_size:
            return IngestResult(key=key, total_length=len(text), is_ocr=is_ocr, content=text)

        self._cache.put(key, text, is_ocr)
        segments = compute_segments(len(text), self._segment_size)
        print(
            f"[SegmentServer] Cached '{key}' ({len(text)} chars) "
            f"as {len(segments)} segments of {self._segment_size}."
        )
        return IngestResult(key=key, total_length=len(text), is_ocr=is_ocr, segments=segments)

    def fetch(self, key: str, index: int) -> str:
        return self.fetch_segment(key, index)[1]

    def fetch_segment(self, key: str, index: int) -> Tuple[Segment, str, bool]:
        """Return the segment bounds, its text and the OCR flag. Raises SegmentNotFound."""
        if index < 0:
            raise ValueError("Segment index cannot be negative.")

        cached = self._cache.get(key)
        if cached is None:
            raise SegmentNotFound(key, index)

        segments = compute_segments(len(cached.content), self._segment_size)
        if index >= len(segments):
            raise SegmentNotFound(key, index, reason=f"document has {len(segments)} segments")

        segment = segments[index]
        return segment, cached.content[segment.start:segment.end], cached.is_ocr


# quote_finder/domain/models.py

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Sentence:
    """
    A candidate quote unit produced by the sentence segmenter.
    `index` is its position in the segmented sequence (dense, renumbered).
    """
    text: str
    index: int


@dataclass(frozen=True)
class ScoredSentence(Sentence):
    """
    A sentence with every relevance signal the scorer computed for it.
    """
    keyword_hits: int = 0
    fuzzy_weight: float = 0.0
    exact_topic_match: float = 0.0
    keyword_density: float = 0.0
    length_ok: float = 1.0
    position_weight: float = 1.0
    score: float = 0.0


@dataclass(frozen=True)
class FuzzyMatch:
    """One hit from a fuzzy search. Lower `score` means a closer match."""
    index: int
    item: str
    score: float


@dataclass
class CacheEntry:
    key: str
    content: str
    is_ocr: bool
    timestamp: float


@dataclass(frozen=True)
class CachedContent:
    """What a cache read hands back to callers."""
    content: str
    is_ocr: bool


@dataclass(frozen=True)
class Segment:
    """Half-open character range [start, end) over a cached document."""
    index: int
    start: int
    end: int

    def to_dict(self) -> dict:
        return {"index": self.index, "start": self.start, "end": self.end}


@dataclass
class IngestResult:
    """
    Outcome of ingesting a document.

    Small documents come back inline in `content`; large ones are cached
    and described by `segments` instead.
    """
    key: str
    total_length: int
    is_ocr: bool = False
    content: Optional[str] = None
    segments: List[Segment] = field(default_factory=list)

    @property
    def requires_segmentation(self) -> bool:
        return bool(self.segments)


@dataclass(frozen=True)
class Quote:
    quote: str
    relevance: str

    def to_dict(self) -> dict:
        return {"quote": self.quote, "relevance": self.relevance}


@dataclass
class RankResult:
    """
    Final answer of a ranking pass.
    An empty `quotes` list with a `message` means the document had no relevance signal.
    """
    quotes: List[Quote]
    candidates: List[Sentence] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.quotes


@dataclass
class PdfExtraction:
    page_count: int
    text: str
    scanned_threshold: int = 500

    @property
    def avg_chars_per_page(self) -> float:
        return len(self.text) / self.page_count if self.page_count > 0 else 0.0

    @property
    def looks_scanned(self) -> bool:
        # Very little extractable text per page suggests an image-only PDF
        return self.page_count > 0 and self.avg_chars_per_page < self.scanned_threshold

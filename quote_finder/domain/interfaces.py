# quote_finder/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List

from .models import FuzzyMatch, PdfExtraction


class FuzzySearchPort(ABC):
    """
    Approximate matcher over a corpus of strings.
    Scores follow the "distance" convention: 0.0 is a perfect match.
    """

    @abstractmethod
    def search(self, corpus: List[str], query: str) -> List[FuzzyMatch]: ...


class RefinementPort(ABC):
    """
    External model that picks the final quotes out of a candidate block.
    Returns the raw model output; parsing belongs to the application layer.
    """

    @abstractmethod
    def refine(self, topic: str, candidate_text: str, is_ocr: bool = False) -> str: ...


class DocumentExtractorPort(ABC):

    @abstractmethod
    def extract(self, data: bytes) -> PdfExtraction:
        """
        Return the page count and the concatenated text of a binary document.
        Raises ValueError when the document cannot be parsed.
        """
        ...


class OCRPort(ABC):

    @abstractmethod
    def extract_pages(self, data: bytes, pages: List[int]) -> str:
        """
        Recognize text on the given 1-based pages of a binary document.
        Implementations may be called concurrently from worker threads.
        """
        ...

# quote_finder/infrastructure/fuzzy_search.py

from typing import List

import Levenshtein

from quote_finder.domain.interfaces import FuzzySearchPort
from quote_finder.domain.models import FuzzyMatch


DEFAULT_THRESHOLD = 0.6


class LevenshteinFuzzySearch(FuzzySearchPort):
    """
    Approximate substring search of a query inside each corpus string.

    For every string, the query is aligned against each window of the same
    length and the smallest edit distance wins. That distance, divided by
    the query length, is the match score (0.0 = the query occurs verbatim).
    Strings scoring above `threshold` are not reported.

    Matching is case-insensitive.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("Fuzzy threshold must be between 0 and 1.")
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def search(self, corpus: List[str], query: str) -> List[FuzzyMatch]:
        query = (query or "").strip().lower()
        if not query:
            return []

        matches = [
            FuzzyMatch(index=i, item=item, score=self.distance(query, item.lower()))
            for i, item in enumerate(corpus)
        ]
        hits = [m for m in matches if m.score <= self._threshold]
        return sorted(hits, key=lambda m: (m.score, m.index))

    @staticmethod
    def distance(query: str, text: str) -> float:
        """Best normalized edit distance of `query` against any same-length window of `text`."""
        width = len(query)
        if width == 0:
            return 1.0
        if len(text) <= width:
            return min(1.0, Levenshtein.distance(query, text) / width)

        best = width
        for start in range(len(text) - width + 1):
            best = min(best, Levenshtein.distance(query, text[start:start + width]))
            if best == 0:
                break
        return best / width

# quote_finder/application/quote_service.py

from typing import List, Optional

from quote_finder.application.context_window import select_context
from quote_finder.application.normalizer import normalize_text
from quote_finder.application.refinement import fallback_quotes, parse_refinement_response
from quote_finder.application.scorer import RelevanceScorer, ScoringConfig
from quote_finder.application.segmenter import split_sentences
from quote_finder.domain.errors import RefinementParseFailure
from quote_finder.domain.interfaces import FuzzySearchPort, RefinementPort
from quote_finder.domain.models import RankResult, Sentence


NO_RELEVANT_QUOTES = "No relevant quotes found"
DEFAULT_MAX_CONTENT_CHARS = 50000


class QuoteRankingService:
    """
    Core use case: find the quotes in a document that speak to a topic.

    Pipeline:
        normalize → split into sentences → score → expand context windows
        → restore reading order → refine with the external model

    The refinement model is only consulted when the document shows some
    relevance signal; an unreadable model answer degrades to the
    pre-selected sentences instead of failing the request.
    """

    def __init__(
        self,
        fuzzy_search: FuzzySearchPort,
        refiner: RefinementPort,
        scoring_config: ScoringConfig = ScoringConfig(),
        max_content_chars: int = DEFAULT_MAX_CONTENT_CHARS,
        max_selected: Optional[int] = None,
    ):
        self._scorer = RelevanceScorer(fuzzy_search, scoring_config)
        self._refiner = refiner
        self._max_content_chars = max_content_chars
        self._max_selected = max_selected

    def select_candidates(self, topic: str, text: str) -> List[Sentence]:
        """
        Everything up to (but excluding) the external model call.
        Returns the selected sentences in document order, or [] when the
        document has no relevance signal.
        """
        topic = self._validate_topic(topic)
        normalized = normalize_text(str(text or "")[: self._max_content_chars])
        sentences = split_sentences(normalized)

        candidates = self._scorer.score(sentences, topic)
        if not candidates:
            return []

        indices = select_context(candidates, len(sentences), self._max_selected)
        return [sentences[i] for i in indices]

    def rank(self, topic: str, text: str, is_ocr: bool = False) -> RankResult:
        if not str(text or "").strip():
            raise ValueError("Document content cannot be empty.")

        selected = self.select_candidates(topic, text)
        if not selected:
            print(f"[QuoteService] No relevance signal for topic '{topic.strip()}'.")
            return RankResult(quotes=[], message=NO_RELEVANT_QUOTES)

        selected_texts = [s.text for s in selected]
        print(f"[QuoteService] Sending {len(selected_texts)} candidate sentences for refinement...")
        raw = self._refiner.refine(topic.strip(), "\n\n".join(selected_texts), is_ocr=is_ocr)

        try:
            quotes = parse_refinement_response(raw)
        except RefinementParseFailure as error:
            print(f"[QuoteService] ⚠ Refinement parsing failed, using selected sentences: {error}")
            quotes = fallback_quotes(selected_texts)

        return RankResult(quotes=quotes, candidates=selected)

    @staticmethod
    def _validate_topic(topic: str) -> str:
        topic = (topic or "").strip()
        if not topic:
            raise ValueError("Topic cannot be empty.")
        return topic


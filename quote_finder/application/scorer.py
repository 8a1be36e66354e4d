# quote_finder/application/scorer.py

import re
from dataclasses import dataclass
from typing import Dict, List

from quote_finder.domain.interfaces import FuzzySearchPort
from quote_finder.domain.models import FuzzyMatch, ScoredSentence, Sentence


# ── Score weights ─────────────────────────────────────────────────────────────
# Empirically calibrated. Tune through ScoringConfig, not by editing the formula.
KEYWORD_HIT_WEIGHT      = 2.0
FUZZY_WEIGHT            = 1.5
EXACT_TOPIC_WEIGHT      = 3.0
KEYWORD_DENSITY_WEIGHT  = 1.0
LENGTH_WEIGHT           = 0.3
POSITION_WEIGHT         = 0.1

# ── Signal parameters ─────────────────────────────────────────────────────────
EXACT_TOPIC_BOOST       = 2.0
KEYWORD_DENSITY_SCALE   = 10.0
MIN_KEYWORD_LEN         = 3
MIN_SENTENCE_LEN        = 20
MAX_SENTENCE_LEN        = 500
LENGTH_PENALTY          = 0.5
POSITION_DECAY_CAP      = 0.8

# ── Candidate filter thresholds ───────────────────────────────────────────────
MIN_FUZZY_WEIGHT        = 0.3
MIN_CANDIDATE_SCORE     = 0.8

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ScoringConfig:
    keyword_hit_weight: float = KEYWORD_HIT_WEIGHT
    fuzzy_weight: float = FUZZY_WEIGHT
    exact_topic_weight: float = EXACT_TOPIC_WEIGHT
    keyword_density_weight: float = KEYWORD_DENSITY_WEIGHT
    length_weight: float = LENGTH_WEIGHT
    position_weight: float = POSITION_WEIGHT

    exact_topic_boost: float = EXACT_TOPIC_BOOST
    keyword_density_scale: float = KEYWORD_DENSITY_SCALE
    min_keyword_len: int = MIN_KEYWORD_LEN
    min_sentence_len: int = MIN_SENTENCE_LEN
    max_sentence_len: int = MAX_SENTENCE_LEN
    length_penalty: float = LENGTH_PENALTY
    position_decay_cap: float = POSITION_DECAY_CAP

    min_fuzzy_weight: float = MIN_FUZZY_WEIGHT
    min_candidate_score: float = MIN_CANDIDATE_SCORE


def extract_keywords(topic: str, min_length: int = MIN_KEYWORD_LEN) -> List[str]:
    """Lowercase the topic, split on non-alphanumeric runs, keep tokens of min_length+."""
    return [token for token in _NON_ALNUM.split((topic or "").lower()) if len(token) >= min_length]


def fuzzy_weights(matches: List[FuzzyMatch]) -> Dict[int, float]:
    """
    Invert distance-style scores into weights in [0, 1].
    A sentence matched more than once keeps its best weight.
    """
    weights: Dict[int, float] = {}
    for match in matches:
        weight = 1.0 - min(1.0, match.score) if match.score is not None else 0.0
        weights[match.index] = max(weights.get(match.index, 0.0), weight)
    return weights


class RelevanceScorer:
    """
    Scores every sentence of a document against a topic by combining:
    - keyword hits and keyword density
    - fuzzy similarity to the whole topic
    - an exact whole-topic substring boost
    - a mild length sanity factor and an early-position bonus

    score() returns the filtered candidate set, or an empty list when the
    document carries no relevance signal at all.
    """

    def __init__(self, fuzzy_search: FuzzySearchPort, config: ScoringConfig = ScoringConfig()):
        self._fuzzy_search = fuzzy_search
        self._config = config

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def score(self, sentences: List[Sentence], topic: str) -> List[ScoredSentence]:
        if not sentences:
            return []

        matches = self._fuzzy_search.search([s.text for s in sentences], topic)
        scored = self.score_all(sentences, topic, matches)

        has_keyword_signal = any(entry.keyword_hits > 0 for entry in scored)
        if not has_keyword_signal and not matches:
            return []

        return self.filter_candidates(scored)

    def score_all(
        self,
        sentences: List[Sentence],
        topic: str,
        matches: List[FuzzyMatch],
    ) -> List[ScoredSentence]:
        cfg = self._config
        keywords = extract_keywords(topic, cfg.min_keyword_len)
        weights = fuzzy_weights(matches)
        lowered_topic = topic.lower()
        total = len(sentences) or 1

        scored = []
        for sentence in sentences:
            lowered = sentence.text.lower()
            keyword_hits = sum(1 for keyword in keywords if keyword in lowered)
            fuzzy = weights.get(sentence.index, 0.0)
            exact = cfg.exact_topic_boost if lowered_topic and lowered_topic in lowered else 0.0
            word_count = len(sentence.text.split(" "))
            density = keyword_hits / max(1, word_count) * cfg.keyword_density_scale
            length_ok = (
                1.0
                if cfg.min_sentence_len <= len(sentence.text) <= cfg.max_sentence_len
                else cfg.length_penalty
            )
            position = 1.0 - min(cfg.position_decay_cap, sentence.index / total)

            score = (
                cfg.keyword_hit_weight * keyword_hits
                + cfg.fuzzy_weight * fuzzy
                + cfg.exact_topic_weight * exact
                + cfg.keyword_density_weight * density
                + cfg.length_weight * length_ok
                + cfg.position_weight * position
            )

            scored.append(ScoredSentence(
                text=sentence.text,
                index=sentence.index,
                keyword_hits=keyword_hits,
                fuzzy_weight=fuzzy,
                exact_topic_match=exact,
                keyword_density=density,
                length_ok=length_ok,
                position_weight=position,
                score=score,
            ))
        return scored

    def filter_candidates(self, scored: List[ScoredSentence]) -> List[ScoredSentence]:
        cfg = self._config
        filtered = [
            entry for entry in scored
            if entry.exact_topic_match > 0
            or entry.keyword_hits > 0
            or entry.fuzzy_weight >= cfg.min_fuzzy_weight
            or entry.score > cfg.min_candidate_score
        ]
        if not filtered:
            filtered = [entry for entry in scored if entry.score > 0]
        return sort_by_score(filtered)


def sort_by_score(entries: List[ScoredSentence]) -> List[ScoredSentence]:
    """Score descending, ties by original index ascending."""
    return sorted(entries, key=lambda entry: (-entry.score, entry.index))

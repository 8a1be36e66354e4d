# tests/test_quote_service.py

import json
from unittest.mock import MagicMock

import pytest

from quote_finder.application.quote_service import NO_RELEVANT_QUOTES, QuoteRankingService
from quote_finder.infrastructure.fuzzy_search import LevenshteinFuzzySearch


# ── Fixtures ──────────────────────────────────────────────────────────────────

DOCUMENT = " ".join(
    [f"Paragraph {i} is about gardening, baking bread and walking the dog." for i in range(12)]
    + ["The new climate policy was announced on Tuesday by the minister."]
    + [f"Closing remark {i} covers sports results from the weekend league." for i in range(12)]
)


@pytest.fixture
def refiner():
    mock = MagicMock()
    mock.refine.return_value = json.dumps([
        {"quote": "The new climate policy was announced on Tuesday by the minister.",
         "relevance": "Announces the policy"},
    ])
    return mock


@pytest.fixture
def service(refiner):
    return QuoteRankingService(LevenshteinFuzzySearch(), refiner)


# ── Tests ─────────────────────────────────────────────────────────────────────

def test_rank_returns_refined_quotes(service, refiner):
    result = service.rank("climate policy", DOCUMENT)

    assert not result.is_empty
    assert result.quotes[0].relevance == "Announces the policy"
    topic, candidate_text = refiner.refine.call_args.args
    assert topic == "climate policy"
    assert "The new climate policy was announced" in candidate_text


def test_candidates_are_in_document_order_and_joined_by_blank_lines(service, refiner):
    result = service.rank("climate policy", DOCUMENT)

    indices = [s.index for s in result.candidates]
    assert indices == sorted(indices)
    _, candidate_text = refiner.refine.call_args.args
    assert candidate_text == "\n\n".join(s.text for s in result.candidates)


def test_target_sentence_is_selected_with_its_neighbours(service):
    selected = service.select_candidates("climate policy", DOCUMENT)
    texts = [s.text for s in selected]

    target = texts.index("The new climate policy was announced on Tuesday by the minister.")
    assert texts[target - 1].startswith("Paragraph 11")
    assert texts[target + 1].startswith("Closing remark 0")


def test_no_signal_skips_refiner():
    fuzzy = MagicMock()
    fuzzy.search.return_value = []
    refiner = MagicMock()
    service = QuoteRankingService(fuzzy, refiner)

    result = service.rank("quantum chromodynamics", DOCUMENT)

    assert result.is_empty
    assert result.message == NO_RELEVANT_QUOTES
    refiner.refine.assert_not_called()


def test_unparseable_refinement_falls_back_to_selected_sentences(service, refiner):
    refiner.refine.return_value = "Sorry, I cannot help with that."

    result = service.rank("climate policy", DOCUMENT)

    assert [q.quote for q in result.quotes] == [s.text for s in result.candidates]
    assert result.quotes[0].relevance.startswith("Selected based on topic relevance")


def test_ocr_flag_is_forwarded(service, refiner):
    service.rank("climate policy", DOCUMENT, is_ocr=True)

    assert refiner.refine.call_args.kwargs == {"is_ocr": True}


def test_markup_input_is_normalized_before_ranking(service, refiner):
    html = f"<html><body><p>{DOCUMENT}</p><script>climate policy climate policy</script></body></html>"

    result = service.rank("climate policy", html)

    assert all("<" not in s.text for s in result.candidates)
    assert not any("climate policy climate policy" in s.text for s in result.candidates)


def test_content_is_truncated_before_analysis(refiner):
    service = QuoteRankingService(LevenshteinFuzzySearch(), refiner, max_content_chars=200)

    selected = service.select_candidates("climate policy", DOCUMENT)

    assert all("climate" not in s.text for s in selected)


@pytest.mark.parametrize("topic", ["", "   ", None])
def test_empty_topic_is_rejected(service, topic):
    with pytest.raises(ValueError):
        service.rank(topic, DOCUMENT)


def test_empty_content_is_rejected(service):
    with pytest.raises(ValueError):
        service.rank("climate policy", "   ")

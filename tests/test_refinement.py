# tests/test_refinement.py

import pytest

from quote_finder.application.refinement import (
    fallback_quotes,
    parse_refinement_response,
    strip_code_fence,
)
from quote_finder.domain.errors import RefinementParseFailure
from quote_finder.domain.models import Quote


def test_object_items_are_read_as_quote_and_relevance():
    raw = '[{"quote": "Taxes rose sharply.", "relevance": "Direct statement on taxes"}]'

    assert parse_refinement_response(raw) == [
        Quote(quote="Taxes rose sharply.", relevance="Direct statement on taxes")
    ]


def test_bare_strings_get_numbered_default_relevance():
    quotes = parse_refinement_response('["First quote.", "Second quote."]')

    assert [q.relevance for q in quotes] == ["AI-analyzed quote #1", "AI-analyzed quote #2"]


def test_missing_relevance_falls_back_to_default():
    quotes = parse_refinement_response('[{"quote": "Only the quote."}]')

    assert quotes == [Quote(quote="Only the quote.", relevance="AI-analyzed quote #1")]


def test_code_fence_is_stripped_before_parsing():
    raw = '```json\n[{"quote": "Fenced.", "relevance": "r"}]\n```'

    assert strip_code_fence(raw) == '[{"quote": "Fenced.", "relevance": "r"}]'
    assert parse_refinement_response(raw)[0].quote == "Fenced."


def test_empty_array_is_a_valid_answer():
    assert parse_refinement_response("[]") == []


def test_unusable_items_are_skipped():
    quotes = parse_refinement_response('["", 42, {"relevance": "no quote"}, "Kept."]')

    assert [q.quote for q in quotes] == ["Kept."]
    assert quotes[0].relevance == "AI-analyzed quote #4"


@pytest.mark.parametrize("raw", [
    "",
    "   ",
    "Here are your quotes: none",
    '{"quote": "not an array"}',
    '[1, 2, 3]',
])
def test_unreadable_responses_raise_parse_failure(raw):
    with pytest.raises(RefinementParseFailure):
        parse_refinement_response(raw)


def test_fallback_returns_sentences_verbatim_in_order():
    quotes = fallback_quotes(["One sentence here.", "Another sentence there."])

    assert [q.quote for q in quotes] == ["One sentence here.", "Another sentence there."]
    assert quotes[1].relevance == "Selected based on topic relevance and text analysis #2"

# quote_finder/application/refinement.py

import json
import re
from typing import List, Optional, Union

from quote_finder.domain.errors import RefinementParseFailure
from quote_finder.domain.models import Quote


# The model answers either with bare strings or with {"quote", "relevance"} objects.
RawQuote = Union[str, dict]

_OPENING_FENCE = re.compile(r"```(?:json)?\s*")
_CLOSING_FENCE = re.compile(r"```\s*$")


def strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if "```" in text:
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text)
    return text.strip()


def parse_refinement_response(raw: str) -> List[Quote]:
    """
    Turn the model output into quotes.
    Raises RefinementParseFailure when nothing usable can be read from it.
    """
    if not raw or not raw.strip():
        raise RefinementParseFailure("Empty refinement response.")

    try:
        payload = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as error:
        raise RefinementParseFailure(f"Response is not valid JSON: {error}") from error

    if not isinstance(payload, list):
        raise RefinementParseFailure(
            f"Expected a JSON array of quotes, got {type(payload).__name__}."
        )

    quotes = []
    for position, item in enumerate(payload, start=1):
        quote = _normalize_quote(item, position)
        if quote is not None:
            quotes.append(quote)

    if payload and not quotes:
        raise RefinementParseFailure("No usable quotes in refinement response.")
    return quotes


def fallback_quotes(selected_sentences: List[str]) -> List[Quote]:
    """Hand back the pre-selected sentences verbatim when the model answer is unusable."""
    return [
        Quote(
            quote=sentence,
            relevance=f"Selected based on topic relevance and text analysis #{position}",
        )
        for position, sentence in enumerate(selected_sentences, start=1)
    ]


def _normalize_quote(item: RawQuote, position: int) -> Optional[Quote]:
    default_relevance = f"AI-analyzed quote #{position}"

    if isinstance(item, str):
        text = item.strip()
        return Quote(quote=text, relevance=default_relevance) if text else None

    if isinstance(item, dict):
        text = str(item.get("quote") or "").strip()
        if not text:
            return None
        relevance = str(item.get("relevance") or "").strip() or default_relevance
        return Quote(quote=text, relevance=relevance)

    return None

# quote_finder/application/normalizer.py

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning


_WHITESPACE = re.compile(r"\s+")
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


def looks_like_markup(text: str) -> bool:
    return "<" in text and ">" in text


def normalize_text(raw: str) -> str:
    """
    Best-effort conversion of page content to a single line of plain text.

    Markup is reduced to the text of its <body> (or the whole document when
    there is no body). Any parser failure falls back to the raw input.
    """
    text = raw or ""
    if looks_like_markup(text):
        text = _extract_markup_text(text)
    return _WHITESPACE.sub(" ", text).strip()


def _extract_markup_text(raw: str) -> str:
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(raw, "html.parser")
        for tag in soup(_NON_CONTENT_TAGS):
            tag.decompose()
        root = soup.body or soup
        return root.get_text(separator=" ")
    except Exception as error:
        print(f"[Normalizer] Markup parsing failed, using plain text: {error}")
        return raw

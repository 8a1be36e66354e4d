# quote_finder/application/segmenter.py

import re
from typing import List

from quote_finder.domain.models import Sentence


# Anything shorter is a header, label or stray fragment rather than a quote.
MIN_QUOTE_LEN = 20

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str, min_length: int = MIN_QUOTE_LEN) -> List[Sentence]:
    """
    Split normalized text after '.', '!' or '?' followed by whitespace.
    Punctuation stays with the preceding sentence; short units are dropped
    and the survivors are numbered densely from 0.
    """
    units = (unit.strip() for unit in _SENTENCE_BOUNDARY.split(text or ""))
    kept = [unit for unit in units if len(unit) >= min_length]
    return [Sentence(text=unit, index=i) for i, unit in enumerate(kept)]

# quote_finder/application/context_window.py

from typing import List, Optional

from quote_finder.domain.models import ScoredSentence
from quote_finder.application.scorer import sort_by_score


def select_context(
    candidates: List[ScoredSentence],
    total_sentences: int,
    max_selected: Optional[int] = None,
) -> List[int]:
    """
    Pick every candidate plus its immediate neighbours, best score first.

    Neighbours keep a quote from being cut mid-thought when it spans a
    sentence boundary. The returned indices are unique, within
    [0, total_sentences) and in ascending (reading) order.

    max_selected caps the selection for pathological inputs; None means no cap.
    """
    selected: List[int] = []
    used = set()

    def take(index: int) -> None:
        if 0 <= index < total_sentences and index not in used:
            used.add(index)
            selected.append(index)

    for entry in sort_by_score(candidates):
        if max_selected is not None and len(selected) >= max_selected:
            break
        if entry.index in used:
            continue
        take(entry.index)
        take(entry.index - 1)
        take(entry.index + 1)

    if max_selected is not None:
        selected = selected[:max_selected]
    return sorted(selected)


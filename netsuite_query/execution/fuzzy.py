"""
Approximate matching of user input against record fields.

Scores run from 0 (perfect) to 1 (unrelated). A match is the best
similarity of the query against a window of the field near its start,
penalised by how far into the field the window begins.
"""

import logging
from difflib import SequenceMatcher
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.2
# Characters into the field after which a window no longer matches.
DEFAULT_DISTANCE = 10
NEAR_EXACT_SCORE = 0.001


def match_score(query: str, text: str, distance: int = DEFAULT_DISTANCE) -> float:
    """Score ``query`` against ``text``, case-insensitively."""
    query = query.strip().lower()
    text = text.strip().lower()
    if not query:
        return 1.0
    if query == text:
        return 0.0

    best = 1.0 - SequenceMatcher(None, query, text).ratio()
    width = len(query)
    for start in range(0, max(len(text) - width, 0) + 1):
        penalty = start / distance
        if penalty >= best:
            break
        window = text[start:start + width]
        score = (1.0 - SequenceMatcher(None, query, window).ratio()) + penalty
        best = min(best, score)
    return best


def fuzzy_search(
    records: List[Dict[str, Any]],
    query: str,
    key: str,
    exact_only_if_exists: bool = False,
    threshold: float = DEFAULT_THRESHOLD,
) -> List[Dict[str, Any]]:
    """
    Find records whose ``key`` field approximately matches ``query``.

    Args:
        records: Records to search
        query: User input
        key: Field compared against the query
        exact_only_if_exists: Return only the exact and near-exact
            matches when there are any
        threshold: Highest score still counted as a match

    Returns:
        Matching records, best first
    """
    scored: List[Tuple[float, int, Dict[str, Any]]] = []
    for position, record in enumerate(records):
        value = record.get(key)
        if value is None:
            continue
        score = match_score(str(query), str(value))
        if score <= threshold:
            scored.append((score, position, record))

    scored.sort(key=lambda item: (item[0], item[1]))

    if exact_only_if_exists:
        wanted = str(query).strip().lower()
        exact = [item for item in scored if str(item[2].get(key)).strip().lower() == wanted]
        if exact:
            scored = exact
        else:
            near = [item for item in scored if item[0] < NEAR_EXACT_SCORE]
            if near:
                scored = near

    logger.debug("Fuzzy search for %r on %s: %d matches", query, key, len(scored))
    return [record for _, _, record in scored]

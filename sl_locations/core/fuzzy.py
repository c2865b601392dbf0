"""Fuzzy matching utilities using RapidFuzz."""
from typing import List, Tuple, Sequence
from rapidfuzz import process
from rapidfuzz.distance import Levenshtein
from sl_locations.core.normalization import normalize_text


EXACT_SCORE = 1.0
CONTAINMENT_SCORE = 0.8


def similarity(first: str, second: str, **kwargs) -> float:
    """
    Score how close two strings are, from 0.0 to 1.0.

    Both inputs are normalized first. Equal strings score 1.0 and a string
    contained in the other scores a flat 0.8; otherwise the score is one minus
    the Levenshtein distance divided by the longer length.

    Extra keyword arguments are accepted so the function can be used as a
    RapidFuzz scorer.

    Args:
        first: First string
        second: Second string

    Returns:
        Similarity score
    """
    s1 = normalize_text(first)
    s2 = normalize_text(second)

    if s1 == s2:
        return EXACT_SCORE
    if s1 in s2 or s2 in s1:
        return CONTAINMENT_SCORE

    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def fuzzy_match(
    query: str,
    choices: Sequence[str],
    threshold: float = 0.3,
    limit: int = 5
) -> List[Tuple[str, float, int]]:
    """
    Rank choices against a query with the similarity scorer.

    Args:
        query: Query string to match
        choices: Candidate strings
        threshold: Minimum similarity score (0-1)
        limit: Maximum number of results to return

    Returns:
        List of tuples (matched_string, score, index) sorted by score descending
    """
    if not query or not choices or limit <= 0:
        return []

    results = process.extract(
        query,
        choices,
        scorer=similarity,
        processor=None,
        limit=None
    )

    matches = [(match, score, idx) for match, score, idx in results if score >= threshold]
    return matches[:limit]

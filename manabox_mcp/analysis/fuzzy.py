"""
Edit-distance matching for card and deck names.

Typed card names are often slightly wrong ("Sords to Plowshares"), so
lookups rank candidates by Levenshtein distance instead of requiring an
exact match.
"""

from collections.abc import Sequence

DEFAULT_MAX_RESULTS = 5


def levenshtein_distance(a: str, b: str) -> int:
    """
    Case-insensitive Levenshtein distance between two strings.

    Insertions, deletions and substitutions each cost 1. Only two rows of
    the DP table are kept, sized by the shorter string.
    """
    left = a.lower()
    right = b.lower()

    if left == right:
        return 0
    if len(left) < len(right):
        left, right = right, left
    if not right:
        return len(left)

    previous = list(range(len(right) + 1))
    current = [0] * (len(right) + 1)

    for i, left_char in enumerate(left, start=1):
        current[0] = i
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous

    return previous[len(right)]


def find_closest_matches(
    query: str,
    candidates: Sequence[str],
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[str]:
    """
    Rank candidates by edit distance to the query.

    Args:
        query: Text to match
        candidates: Strings to rank
        max_results: Maximum number of candidates to return. Zero or
            negative returns nothing.

    Returns:
        Closest candidates first. Candidates at the same distance keep
        their input order.
    """
    if max_results <= 0 or not candidates:
        return []

    scored = [(levenshtein_distance(query, candidate), candidate) for candidate in candidates]
    # sort() is stable: ties stay in candidate order
    scored.sort(key=lambda item: item[0])

    return [candidate for _, candidate in scored[:max_results]]

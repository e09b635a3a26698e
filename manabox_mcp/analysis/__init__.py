from manabox_mcp.analysis.fuzzy import find_closest_matches, levenshtein_distance

__all__ = [
    "find_closest_matches",
    "levenshtein_distance",
]

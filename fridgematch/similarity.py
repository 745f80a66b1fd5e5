from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Plain Levenshtein distance (insert, delete, substitute all cost 1)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Return 1 - distance / longest length, in [0, 1].

    Both names are lower-cased and trimmed first. Two empty strings are
    considered identical (1.0).
    """
    a = (a or "").strip().lower()
    b = (b or "").strip().lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest

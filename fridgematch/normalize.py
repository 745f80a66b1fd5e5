from typing import Iterable, List, Optional


def normalize_ingredient(s: Optional[str]) -> str:
    """Lower-case and trim an ingredient name.

    Anything that is not a non-empty string normalizes to "" so callers can
    treat it as an unmatched name.
    """
    if not s or not isinstance(s, str):
        return ""
    # collapse inner runs of whitespace too ("olive   oil" -> "olive oil")
    return " ".join(s.strip().lower().split())


def dedupe_ingredients(items: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Normalize a list of names, dropping blanks and repeats.

    The first occurrence keeps its position.
    """
    seen = set()
    out = []
    for item in items or []:
        n = normalize_ingredient(item)
        if not n or n in seen:
            continue
        seen.add(n)
        out.append(n)
    return out


def split_ingredient_text(text: Optional[str]) -> List[str]:
    # Accept newline or comma separated input, as typed into a form or CLI
    if not text:
        return []
    parts = []
    for line in text.replace(",", "\n").split("\n"):
        if line and line.strip():
            parts.append(line.strip())
    return parts

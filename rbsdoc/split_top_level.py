"""Utility for splitting type lists on top-level commas."""

OPENERS = "[{("
CLOSERS = "]})"


def split_top_level(text: str, *, angle: bool = False) -> list[str]:
    """Split on commas that are not nested inside brackets.

    With ``angle`` set, ``<``/``>`` also nest (prose generics such as
    ``Hash<Symbol, String>``); a ``>`` belonging to ``=>`` or ``->`` never closes.
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    prev = ""
    for ch in text:
        if ch in OPENERS or (angle and ch == "<"):
            depth += 1
        elif ch in CLOSERS or (angle and ch == ">" and prev not in ("=", "-")):
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        prev = ch
    parts.append("".join(current).strip())
    return [p for p in parts if p]

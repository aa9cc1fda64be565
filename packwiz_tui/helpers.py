"""Small numeric and text helpers shared by the views."""

from __future__ import annotations

ELLIPSIS = "…"


def truncate(text: str, limit: int) -> str:
    """Shorten ``text`` to ``limit`` characters, ending with an ellipsis if cut."""
    if len(text) <= limit:
        return text
    if limit < 1:
        raise ValueError(f"cannot truncate to {limit} characters")
    return text[: limit - 1] + ELLIPSIS


def clamp(n: int, lo: int, hi: int) -> int:
    """Return ``n`` limited to the range ``[lo, hi]``."""
    if n < lo:
        return lo
    if n > hi:
        return hi
    return n


def visible_window(selected: int, total: int, height: int) -> tuple[int, int]:
    """Return the ``(start, end)`` slice of a list that keeps ``selected`` in view."""
    if total <= height:
        return 0, total
    start = max(selected - height // 2, 0)
    end = start + height
    if end > total:
        end = total
        start = max(end - height, 0)
    return start, end
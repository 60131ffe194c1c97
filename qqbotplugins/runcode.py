"""Helpers for replies from the online code runner."""

from __future__ import annotations

MAX_LINES = 30
MAX_CHARS = 1000
_ELLIPSIS = "\n............\n............"


def cut_too_long(text: str) -> str:
    """Cut output after 30 line breaks or 1000 characters, marking the cut."""
    count = 0
    last = len(text) - 1
    for index, char in enumerate(text):
        if char == "\r" and index < last and text[index + 1] == "\n":
            pass
        elif char in "\n\r":
            count += 1
        if count > MAX_LINES or index > MAX_CHARS:
            return text[: index - 1] + _ELLIPSIS
    return text
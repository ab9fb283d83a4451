"""Small line and whitespace helpers."""

from __future__ import annotations

_WHITESPACE = " \t\n\v\f\r"


def chomp(text: str) -> str:
    """Remove one trailing newline, if present."""
    return text[:-1] if text.endswith("\n") else text


def rtrim(text: str) -> str:
    """Strip whitespace from the right of ``text``."""
    return text.rstrip(_WHITESPACE)


def ltrim(text: str) -> str:
    """Strip whitespace from the left of ``text``."""
    return text.lstrip(_WHITESPACE)


def trim(text: str) -> str:
    """Strip whitespace from both ends of ``text``."""
    return ltrim(rtrim(text))


def empty(text: str | None) -> bool:
    """Tell whether ``text`` is missing or holds only whitespace."""
    if text is None:
        return True
    return not text.strip(_WHITESPACE)


def word_count(pattern: str, text: str) -> int:
    """Count the runs of characters that are not ``pattern``."""
    return len(split(pattern, text))


def split(pattern: str, text: str) -> list[str]:
    """Split ``text`` on the single character ``pattern``, dropping empty fields."""
    return [word for word in text.split(pattern) if word]
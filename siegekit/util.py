"""General string, timing and random-number helpers."""

from __future__ import annotations

import os
import sys
from typing import NamedTuple

RAND_MAX = 2147483647
_DEFAULT_CLOCK_TICKS = 100

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
_ASCII_UPPER = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _ascii_upper(text: str) -> str:
    return text.translate(_ASCII_UPPER)


class TimeSpec(NamedTuple):
    """Result of parsing a ``--time`` option: a repetition flag and seconds."""

    time: int
    secs: int


def parse_time(text: str) -> TimeSpec:
    """Parse a duration such as ``30s``, ``5m`` or ``1h``.

    A bare number is taken as minutes.  Text without leading digits
    yields ``TimeSpec(0, 0)``.
    """
    digits = len(text) - len(text.lstrip("0123456789"))
    if digits == 0:
        return TimeSpec(0, 0)
    amount = int(text[:digits])
    multipliers = {"s": 1, "m": 60, "h": 3600}
    for char in text[digits:]:
        factor = multipliers.get(_ascii_lower(char))
        if factor is not None:
            return TimeSpec(1, amount * factor)
    if amount > 0:
        return TimeSpec(amount, amount * 60)
    return TimeSpec(amount, 0)


def substring(text: str, start: int, length: int) -> str | None:
    """Return ``length`` characters of ``text`` from ``start``.

    The length is clamped to the end of the string; ``None`` is returned
    for a non-positive length or a start outside the string.
    """
    if length < 1 or start < 0 or start > len(text):
        return None
    return text[start:start + length]


def okay(code: int) -> bool:
    """Tell whether an HTTP status code is informational or successful."""
    return 100 <= code <= 299


def strmatch(option: str, param: str) -> bool:
    """Compare two strings for equality, ignoring ASCII case."""
    return len(option) == len(param) and _ascii_lower(option) == _ascii_lower(param)


def startswith(prefix: str, text: str) -> bool:
    """Tell whether ``text`` begins with ``prefix`` (case sensitive)."""
    return text.startswith(prefix)


def endswith(suffix: str | None, text: str | None) -> bool:
    """Tell whether ``text`` ends with ``suffix``; ``None`` never matches."""
    if text is None or suffix is None:
        return False
    return text.endswith(suffix)


def uppercase(text: str, length: int) -> str:
    """Upper-case the first ``length`` characters of ``text``."""
    return _ascii_upper(text[:length]) + text[length:]


def lowercase(text: str, length: int) -> str:
    """Lower-case the first ``length`` characters of ``text``."""
    return _ascii_lower(text[:length]) + text[length:]


def stristr(haystack: str, needle: str) -> str | None:
    """Find ``needle`` in ``haystack`` ignoring case.

    Returns the rest of ``haystack`` from the match, or ``None``.
    """
    index = _ascii_lower(haystack).find(_ascii_lower(needle))
    if index < 0:
        return None
    return haystack[index:]


def strncasestr(text: str, needle: str, length: int) -> str | None:
    """Case-insensitive search for ``needle`` in the first ``length`` characters.

    Returns the rest of ``text`` from the match, or ``None`` when either
    string is empty or there is no match inside the window.
    """
    window = text[:length]
    if not window or not needle or len(needle) > len(window):
        return None
    index = _ascii_lower(window).find(_ascii_lower(needle))
    if index < 0:
        return None
    return text[index:]


def _clock_ticks() -> int:
    try:
        return os.sysconf("SC_CLK_TCK")
    except (AttributeError, ValueError, OSError):
        return _DEFAULT_CLOCK_TICKS


def elapsed_time(ticks: int) -> float:
    """Convert clock ticks to seconds."""
    return ticks / _clock_ticks()


def urandom() -> int:
    """Return a random signed 32-bit integer from the system's entropy source."""
    return int.from_bytes(os.urandom(4), sys.byteorder, signed=True)


class PosixRandom:
    """The reentrant linear congruential generator of POSIX ``rand_r``."""

    def __init__(self, seed: int) -> None:
        self.state = seed & 0xFFFFFFFF

    def next(self) -> int:
        """Advance the generator and return a value in ``[0, RAND_MAX]``."""
        self.state = (self.state * 1103515245 + 12345) % (RAND_MAX + 1)
        return self.state

    def __iter__(self) -> PosixRandom:
        return self

    def __next__(self) -> int:
        return self.next()
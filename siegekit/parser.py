"""Extraction of the resources an HTML page refers to."""

from __future__ import annotations

import re

from siegekit.normalize import url_normalize
from siegekit.url import Url
from siegekit.util import endswith, stristr, strmatch

CONTROL_TOKENS = " ="
CONTROL_TOKENS_PLUS = " =\"'"
CONTROL_TOKENS_QUOTES = " \"'"

# Longest run of tag text examined at once.
TAG_LIMIT = 4095


class _Tokens:
    """Splits tag text into tokens, each call naming its own delimiters."""

    _patterns: dict[str, re.Pattern[str]] = {}

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    @classmethod
    def _pattern(cls, delimiters: str) -> re.Pattern[str]:
        pattern = cls._patterns.get(delimiters)
        if pattern is None:
            pattern = re.compile(f"[^{re.escape(delimiters)}]+")
            cls._patterns[delimiters] = pattern
        return pattern

    def next(self, delimiters: str) -> str | None:
        """Return the next token, or ``None`` once the text is used up."""
        match = self._pattern(delimiters).search(self._text, self._pos)
        if match is None:
            self._pos = len(self._text)
            return None
        self._pos = min(match.end() + 1, len(self._text))
        return match.group()

    @property
    def rest(self) -> str:
        return self._text[self._pos:]

    def each(self, delimiters: str):
        """Iterate over the remaining tokens."""
        return iter(lambda: self.next(delimiters), None)


def _starts(token: str, word: str) -> bool:
    return strmatch(token[:len(word)], word)


def _add(found: list[Url], url: Url | None) -> None:
    if url is None or url.hostname is None or len(url.hostname) < 2:
        return
    if any(strmatch(url.absolute, known.absolute) for known in found):
        return
    found.append(url)


def _parse_meta(tokens: _Tokens, base: Url, found: list[Url]) -> None:
    for token in tokens.each(CONTROL_TOKENS):
        if not _starts(token, "content"):
            continue
        for value in tokens.each(CONTROL_TOKENS):
            if stristr(value, "; url=") is None and stristr(value, ";url=") is None:
                continue
            target = tokens.next(CONTROL_TOKENS_QUOTES)
            if target is not None:
                url = url_normalize(base, target)
                if url is not None:
                    url.redirect = True
                _add(found, url)


def _parse_img(tokens: _Tokens, base: Url, found: list[Url]) -> str | None:
    """Handle an ``img`` tag; return a token to examine again, if any."""
    token = tokens.next(CONTROL_TOKENS)
    if token is None:
        return None
    if tokens.rest.startswith('""'):
        return token
    if _starts(token, "src"):
        value = tokens.next(CONTROL_TOKENS_QUOTES)
        if value is not None:
            if _starts(value, "data:image"):
                return value
            url = url_normalize(base, value)
            if url is not None and not endswith("+", url.absolute):
                _add(found, url)
        return None
    for token in tokens.each(CONTROL_TOKENS):
        if _starts(token, "src"):
            value = tokens.next(CONTROL_TOKENS_QUOTES)
            if value is not None and len(value) > 1 and not _starts(value, "data:image"):
                _add(found, url_normalize(base, value))
    return None


def _parse_link(tokens: _Tokens, base: Url, found: list[Url]) -> None:
    stylesheet = False
    href = None
    for token in tokens.each(CONTROL_TOKENS):
        if _starts(token, "rel"):
            token = tokens.next(CONTROL_TOKENS_PLUS)
            if token is None:
                continue
            if _starts(token, "stylesheet"):
                stylesheet = True
            if _starts(token, "next") or _starts(token, "alternate"):
                stylesheet = False
        if _starts(token, "href"):
            value = tokens.next(CONTROL_TOKENS_QUOTES)
            if value is not None:
                href = value
    if stylesheet and href is not None:
        _add(found, url_normalize(base, href))


def _parse_script(tokens: _Tokens, base: Url, found: list[Url]) -> None:
    for token in tokens.each(CONTROL_TOKENS):
        if not _starts(token, "src"):
            continue
        value = tokens.next(CONTROL_TOKENS_QUOTES)
        if value is None or value.startswith("+"):
            # A leading "+" is most likely an inline script expression.
            continue
        _add(found, url_normalize(base, value[:TAG_LIMIT]))


def _parse_frame(tokens: _Tokens) -> None:
    for token in tokens.each(CONTROL_TOKENS):
        if _starts(token, "src"):
            tokens.next(CONTROL_TOKENS_PLUS)


def _parse_tag(tag: str, base: Url, found: list[Url]) -> None:
    tokens = _Tokens(tag)
    top = token = tokens.next(CONTROL_TOKENS)
    while token is not None:
        pending = None
        if _starts(token, "href"):
            tokens.next(CONTROL_TOKENS_PLUS)
        elif _starts(token, "meta"):
            _parse_meta(tokens, base, found)
        elif _starts(token, "img"):
            pending = _parse_img(tokens, base, found)
        elif _starts(token, "link"):
            _parse_link(tokens, base, found)
        elif _starts(token, "script"):
            _parse_script(tokens, base, found)
        elif _starts(token, "location.href"):
            tokens.next(CONTROL_TOKENS_PLUS)
        elif _starts(token, "frame"):
            _parse_frame(tokens)
        elif _starts(token, "background"):
            value = tokens.next(CONTROL_TOKENS_QUOTES)
            if value is not None and top is not None and strmatch("body", top):
                _add(found, url_normalize(base, value[:TAG_LIMIT]))
        token = pending if pending is not None else tokens.next(CONTROL_TOKENS)


def parse_html(base: Url, page: str) -> list[Url]:
    """Return the images, scripts, stylesheets and backgrounds ``page`` loads.

    Links are resolved against ``base``; each URL appears once, in the
    order first seen.  Anchors and frames are not followed.
    """
    found: list[Url] = []
    if not page:
        return found
    text = page.replace("\\", "")
    pos = 0
    while True:
        opening = text.find("<", pos)
        if opening < 0:
            break
        pos = opening + 1
        if text.startswith("!--", pos):
            close = text.find("-->", pos + 3)
            if close < 0:
                break
            pos = close + 3 + 1
            continue
        close = text.find(">", pos)
        stop = len(text) if close < 0 else close
        stop = min(stop, pos + TAG_LIMIT)
        _parse_tag(text[pos:stop], base, found)
        if stop >= len(text):
            break
        pos = stop + 1
    return found
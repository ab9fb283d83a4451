"""Resolution of links found in a page against the URL of that page."""

from __future__ import annotations

from siegekit.url import Url
from siegekit.util import endswith, stristr

_ENTITY_AMPERSANDS = ("&amp;", "&#038;")


def url_replace(text: str, needle: str, replacement: str) -> str:
    """Replace every occurrence of ``needle`` in ``text`` with ``replacement``."""
    if not needle:
        raise ValueError("the text to replace must not be empty")
    return text.replace(needle, replacement)


def _build(base: Url, location: str) -> str:
    """Join a relative ``location`` onto ``base``."""
    if location.startswith("/"):
        if location.startswith("//"):
            # Protocol-relative: keep the scheme of the base.
            return f"{base.scheme_name}:{location}"
        return f"{base.scheme_name}://{base.hostname}:{base.port}{location}"
    if endswith("/", base.path):
        # Avoid paths such as /dir/./file when the link starts with ./
        tail = location[2:] if location.startswith(".") and len(location) > 1 else location
        return f"{base.scheme_name}://{base.hostname}:{base.port}{base.path}{tail}"
    return f"{base.scheme_name}://{base.hostname}:{base.port}{base.path}/{location}"


def url_normalize(base: Url, location: str) -> Url | None:
    """Turn a link found on the page at ``base`` into a full URL.

    Returns ``None`` for inline GIF images written as ``data:`` links.
    """
    for entity in _ENTITY_AMPERSANDS:
        location = url_replace(location, entity, "&")

    if stristr(location, "data:image/gif") is not None:
        return None

    if stristr(location, "://") is not None:
        candidate = Url(location)
        if candidate.hostname is not None and len(candidate.hostname) > 1:
            return candidate

    if (
        not location.startswith(("/", "."))
        and "." in location
        and "/" in location
    ):
        # Most likely host/path without a scheme.
        candidate = Url(location)
        candidate.set_scheme(base.scheme)
        if candidate.hostname is not None and "." in candidate.hostname:
            return candidate

    if "localhost" in location:
        candidate = Url(location)
        candidate.set_scheme(base.scheme)
        if candidate.hostname is not None and len(candidate.hostname) == len("localhost"):
            return candidate

    result = Url(_build(base, location))
    result.set_scheme(base.scheme)
    return result


def url_normalize_string(base: Url, location: str) -> str | None:
    """Return the absolute text of :func:`url_normalize`, or ``None``."""
    result = url_normalize(base, location)
    return None if result is None else result.absolute
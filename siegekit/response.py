"""Parsing of HTTP response status and header lines."""

from __future__ import annotations

import enum
import re
from typing import Iterator

from siegekit.text import trim
from siegekit.util import stristr, strmatch

ACCEPT_RANGES = "accept-ranges"
CACHE_CONTROL = "cache-control"
CHARSET = "charset"
CONNECTION = "connection"
CONTENT_DISPOSITION = "content-disposition"
CONTENT_ENCODING = "content-encoding"
CONTENT_LENGTH = "content-length"
CONTENT_TYPE = "content-type"
CONTENT_LOCATION = "content-location"
ETAG = "etag"
EXPIRES = "expires"
KEEPALIVE_MAX = "keepalive-max"
KEEPALIVE_TIMEOUT = "keepalive-timeout"
LAST_MODIFIED = "last-modified"
LOCATION = "location"
PRAGMA = "pragma"
PROTOCOL = "protocol"
PROXY_AUTHENTICATE = "proxy-authenticate"
PROXY_CONNECTION = "proxy-connection"
REFRESH = "refresh"
REDIRECT = "redirect"
RESPONSE_CODE = "response-code"
SET_COOKIE = "set-cookie"
TRANSFER_ENCODING = "transfer-encoding"
WWW_AUTHENTICATE = "www-authenticate"

DEFAULT_CODE = 418
DEFAULT_PROTOCOL = "HTTP/1.1"
DEFAULT_CONTENT_TYPE = "unknown"
DEFAULT_CHARSET = "iso-8859-1"
DEFAULT_KEEPALIVE_TIMEOUT = 15
DEFAULT_KEEPALIVE_MAX = 5

_WHITESPACE = " \t\n\v\f\r"
_SEPARATORS = "=:"
_QUOTES = "\"'"
_INTEGER = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class Connection(enum.IntEnum):
    """Connection handling requested by the server."""

    CLOSE = 1
    KEEPALIVE = 2
    METER = 4


class TransferEncoding(enum.IntEnum):
    """Transfer encoding of the response body."""

    NONE = 1
    CHUNKED = 2
    TRAILER = 4


class ContentEncoding(enum.IntEnum):
    """Content encoding of the response body."""

    COMPRESS = 1
    DEFLATE = 2
    GZIP = 4
    BZIP2 = 8


class AuthType(enum.Enum):
    """Authentication scheme named in a challenge."""

    BASIC = enum.auto()
    DIGEST = enum.auto()
    NTLM = enum.auto()


def _atoi(text: str) -> int:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _has_prefix(line: str, prefix: str) -> bool:
    return strmatch(line[:len(prefix)], prefix)


def _dequote(text: str) -> str:
    return text.strip(_QUOTES)


def _strtok(text: str, delimiters: str) -> tuple[str | None, str]:
    """Return the first token of ``text`` and what follows its delimiter."""
    start = 0
    while start < len(text) and text[start] in delimiters:
        start += 1
    if start == len(text):
        return None, ""
    end = start
    while end < len(text) and text[end] not in delimiters:
        end += 1
    return text[start:end], text[end + 1:]


def _pairs(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(option, value)`` pairs from a header value list.

    Each pair is expected after a space and runs to the next ``;`` or ``,``.
    Iteration stops at the first field holding no ``=``.
    """
    pos = 0
    size = len(text)
    while True:
        space = text.find(" ", pos)
        if space < 0:
            space = size
        start = space + 1
        if start >= size:
            return
        end = start
        while end < size and text[end] not in ";,":
            end += 1
        pair = text[start:end]
        pos = end + 1
        if "=" not in pair:
            return
        cut = 0
        while cut < len(pair) and pair[cut] not in _WHITESPACE and pair[cut] not in _SEPARATORS:
            cut += 1
        option = pair[:cut]
        rest = cut + 1
        while rest < len(pair) and (pair[rest] in _WHITESPACE or pair[rest] in _SEPARATORS):
            rest += 1
        yield option, pair[rest:]


class Response:
    """Headers of one HTTP response, filled in line by line."""

    def __init__(self) -> None:
        self.headers: dict[str, object] = {}
        self.from_cache = False
        self.www_auth_type: AuthType | None = None
        self.www_auth_challenge: str | None = None
        self.www_auth_realm: str | None = None
        self.proxy_auth_type: AuthType | None = None
        self.proxy_auth_challenge: str | None = None
        self.proxy_auth_realm: str | None = None

    def _int_value(self, key: str, default: int) -> int:
        value = self.headers.get(key)
        number = -1
        if isinstance(value, int):
            number = value
        elif isinstance(value, str):
            number = _atoi(value)
        return number if number > 0 else default

    # Status line

    def parse_status_line(self, line: str) -> bool:
        """Read a start line such as ``HTTP/1.0 200 OK``."""
        if _has_prefix(line, "http") and _atoi(line[9:]) > 1:
            self.headers[PROTOCOL] = line[:8]
            self.headers[RESPONSE_CODE] = line[9:]
            return True
        return False

    @property
    def code(self) -> int:
        """The status code, or 418 when no status line was read."""
        value = self.headers.get(RESPONSE_CODE)
        if value is None:
            return DEFAULT_CODE
        return _atoi(str(value))

    @property
    def protocol(self) -> str:
        value = self.headers.get(PROTOCOL)
        return DEFAULT_PROTOCOL if value is None else str(value)

    def success(self) -> bool:
        """Tell whether the status is below 400, or an authentication request."""
        if RESPONSE_CODE not in self.headers:
            return False
        code = self.code
        return code < 400 or code in (401, 407)

    def failure(self) -> bool:
        """Tell whether the status is 400 or above, other than 401 and 407."""
        if RESPONSE_CODE not in self.headers:
            return True
        code = self.code
        return code >= 400 and code not in (401, 407)

    # Content type

    def parse_content_type(self, line: str) -> bool:
        """Read a ``Content-Type`` line and any charset it names."""
        value = line[len(CONTENT_TYPE) + 2:]
        if ";" not in line:
            self.headers[CONTENT_TYPE] = value
            return True
        media_type, rest = _strtok(value, ";")
        found = False
        if media_type is not None:
            self.headers[CONTENT_TYPE] = media_type
            found = True
        charset = stristr(rest, "charset=")
        if charset is not None and len(charset) > 8:
            self.headers[CHARSET] = charset[8:]
        return found

    @property
    def content_type(self) -> str:
        value = self.headers.get(CONTENT_TYPE)
        return DEFAULT_CONTENT_TYPE if value is None else str(value)

    @property
    def charset(self) -> str:
        """The declared charset; ISO-8859-1 is recorded when none was given."""
        if self.headers.get(CHARSET) is None:
            self.headers[CHARSET] = DEFAULT_CHARSET
        return str(self.headers[CHARSET])

    # Content length

    def parse_content_length(self, line: str) -> bool:
        """Read a ``Content-Length`` line; lengths below 2 are ignored."""
        if _has_prefix(line, CONTENT_LENGTH):
            value = line[len(CONTENT_LENGTH) + 2:]
            if _atoi(value) > 1:
                self.headers[CONTENT_LENGTH] = value
                return True
        return False

    @property
    def content_length(self) -> int:
        return self._int_value(CONTENT_LENGTH, 0)

    # Encodings

    def parse_content_encoding(self, line: str) -> bool:
        """Read a ``Content-Encoding`` line naming gzip or deflate."""
        if not _has_prefix(line, CONTENT_ENCODING):
            return False
        value = line[len(CONTENT_ENCODING) + 2:]
        if strmatch(value, "gzip"):
            self.headers[CONTENT_ENCODING] = ContentEncoding.GZIP
            return True
        if strmatch(value, "deflate"):
            self.headers[CONTENT_ENCODING] = ContentEncoding.DEFLATE
            return True
        return False

    @property
    def content_encoding(self) -> ContentEncoding | None:
        value = self.headers.get(CONTENT_ENCODING)
        return value if isinstance(value, ContentEncoding) else None

    def parse_transfer_encoding(self, line: str) -> bool:
        """Read a ``Transfer-Encoding`` line."""
        if not _has_prefix(line, TRANSFER_ENCODING):
            return False
        value = trim(line[len(TRANSFER_ENCODING) + 2:])
        if strmatch(value, "chunked"):
            encoding = TransferEncoding.CHUNKED
        elif strmatch(value, "trailer"):
            encoding = TransferEncoding.TRAILER
        else:
            encoding = TransferEncoding.NONE
        self.headers[TRANSFER_ENCODING] = encoding
        return True

    @property
    def transfer_encoding(self) -> TransferEncoding:
        value = self.headers.get(TRANSFER_ENCODING)
        return value if isinstance(value, TransferEncoding) else TransferEncoding.NONE

    # Redirection

    def parse_location(self, line: str) -> bool:
        """Read a ``Location`` or ``Content-Location`` line.

        Returns whether the response is now known to redirect.
        """
        if _has_prefix(line, LOCATION):
            self.headers[LOCATION] = line[len(LOCATION) + 2:]
            self.headers[REDIRECT] = True
        if _has_prefix(line, CONTENT_LOCATION):
            self.headers[LOCATION] = line[len(CONTENT_LOCATION) + 2:]
            self.headers[REDIRECT] = True
        return self.redirect

    @property
    def location(self) -> str | None:
        value = self.headers.get(LOCATION)
        return None if value is None else str(value)

    @property
    def redirect(self) -> bool:
        return self.headers.get(REDIRECT) is True

    # Connection

    def parse_connection(self, line: str) -> bool:
        """Read a ``Connection`` line."""
        if not _has_prefix(line, CONNECTION):
            return False
        if _has_prefix(line[12:], "keep-alive"):
            self.headers[CONNECTION] = Connection.KEEPALIVE
        else:
            self.headers[CONNECTION] = Connection.CLOSE
        return True

    @property
    def connection(self) -> Connection:
        value = self.headers.get(CONNECTION)
        return value if isinstance(value, Connection) else Connection.CLOSE

    def parse_keepalive(self, line: str) -> bool:
        """Read the ``timeout`` and ``max`` options of a ``Keep-Alive`` line."""
        found = False
        for option, value in _pairs(line):
            if _has_prefix(option, "timeout"):
                number = _atoi(value)
                if number > 0:
                    self.headers[KEEPALIVE_TIMEOUT] = number
                found = True
            if _has_prefix(option, "max"):
                number = _atoi(value)
                if number > 0:
                    self.headers[KEEPALIVE_MAX] = number
                found = True
        return found

    @property
    def keepalive_timeout(self) -> int:
        return self._int_value(KEEPALIVE_TIMEOUT, DEFAULT_KEEPALIVE_TIMEOUT)

    @property
    def keepalive_max(self) -> int:
        return self._int_value(KEEPALIVE_MAX, DEFAULT_KEEPALIVE_MAX)

    # Caching

    def parse_last_modified(self, line: str) -> bool:
        """Read a ``Last-Modified`` line."""
        if not _has_prefix(line, LAST_MODIFIED):
            return False
        self.headers[LAST_MODIFIED] = line[len(LAST_MODIFIED) + 2:]
        return True

    @property
    def last_modified(self) -> str | None:
        value = self.headers.get(LAST_MODIFIED)
        return None if value is None else str(value)

    def parse_etag(self, line: str) -> bool:
        """Read an ``ETag`` line, dropping surrounding quotes."""
        if not _has_prefix(line, ETAG):
            return False
        self.headers[ETAG] = _dequote(line[len(ETAG) + 2:])
        return True

    @property
    def etag(self) -> str | None:
        value = self.headers.get(ETAG)
        return None if value is None else str(value)

    # Authentication

    def _realm(self, text: str) -> str | None:
        realm = None
        for option, value in _pairs(text):
            if _has_prefix(option, "realm"):
                realm = _dequote(value)
        return realm

    def parse_www_authenticate(self, line: str) -> bool:
        """Read a ``WWW-Authenticate`` challenge: its scheme and realm."""
        if not _has_prefix(line, WWW_AUTHENTICATE):
            return True
        scheme = line[18:]
        offset = 0
        if _has_prefix(scheme, "digest"):
            offset = 24
            self.www_auth_type = AuthType.DIGEST
            self.www_auth_challenge = scheme
        elif _has_prefix(scheme, "ntlm"):
            offset = 22
            self.www_auth_type = AuthType.NTLM
            self.www_auth_challenge = scheme
        elif self.www_auth_type not in (AuthType.DIGEST, AuthType.NTLM):
            offset = 23
            self.www_auth_type = AuthType.BASIC
        realm = self._realm(line[offset:])
        if realm is not None:
            self.www_auth_realm = realm
        return True

    def parse_proxy_authenticate(self, line: str) -> bool:
        """Read a ``Proxy-Authenticate`` challenge: its scheme and realm."""
        if not _has_prefix(line, PROXY_AUTHENTICATE):
            return True
        scheme = line[20:]
        if _has_prefix(scheme, "digest"):
            offset = 26
            self.proxy_auth_type = AuthType.DIGEST
            self.proxy_auth_challenge = scheme
        else:
            offset = 25
            self.proxy_auth_type = AuthType.BASIC
        realm = self._realm(line[offset:])
        if realm is not None:
            self.proxy_auth_realm = realm
        return True
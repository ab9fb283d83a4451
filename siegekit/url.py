"""Parsing and representation of request URLs.

A URL line may carry a method and a body after the address, for example
``http://example.com/login POST user=me``; a body of ``<file`` is read
from that file.
"""

from __future__ import annotations

import enum
import re
import sys
from pathlib import Path

from siegekit.text import empty, trim
from siegekit.util import strmatch

DEFAULT_CONTENT_TYPE = "application/x-www-form-urlencoded"

_WHITESPACE = " \t\n\v\f\r"
_HEX = "0123456789abcdefABCDEF"
_SCHEME_PREFIX = re.compile(r"[A-Za-z0-9+\-]+:")
_CREDENTIAL_STOP = re.compile(r"[@/?#;]")

_RESERVED = frozenset(b"#&+/:;=?@[]")
_UNSAFE = frozenset(
    list(range(0x00, 0x20))
    + list(b" \"#%:<>@[\\]^`{|}~")
    + list(range(0x7F, 0x100))
)

_METHOD_TOKENS = (
    " GET", " HEAD", " POST", " PUT", " TRACE",
    " DELETE", " OPTIONS", " CONNECT", " PATCH",
)


class Method(enum.IntEnum):
    """HTTP request method."""

    NOMETHOD = 0
    HEAD = 1
    GET = 2
    POST = 3
    PUT = 4
    DELETE = 5
    TRACE = 6
    OPTIONS = 7
    CONNECT = 8
    PATCH = 9


class Scheme(enum.IntEnum):
    """URL scheme."""

    UNSUPPORTED = 0
    HTTP = 1
    HTTPS = 2
    FTP = 3
    PROXY = 4


_SCHEME_NAMES = {
    Scheme.HTTP: "http",
    Scheme.HTTPS: "https",
    Scheme.FTP: "ftp",
    Scheme.PROXY: "proxy",
}

_DEFAULT_PORTS = {Scheme.FTP: 21, Scheme.HTTP: 80, Scheme.HTTPS: 443}

_METHOD_NAMES = {
    Method.POST: "POST",
    Method.PATCH: "PATCH",
    Method.PUT: "PUT",
    Method.DELETE: "DELETE",
    Method.OPTIONS: "OPTIONS",
    Method.HEAD: "HEAD",
}

# Searched in this order; the first one present wins.
_BODY_METHODS = (
    (" POST", Method.POST),
    (" PUT", Method.PUT),
    (" PATCH", Method.PATCH),
    (" OPTIONS", Method.OPTIONS),
    (" DELETE", Method.DELETE),
)

_PREFIX_LENGTHS = (("http:", 7), ("https:", 8), ("ftp:", 6))


def _has_prefix(text: str, prefix: str) -> bool:
    return strmatch(text[:len(prefix)], prefix)


def _scan(text: str, stops: str) -> int:
    """Index of the first character of ``text`` found in ``stops``."""
    for index, char in enumerate(text):
        if char in stops:
            return index
    return len(text)


def _prefix_length(url: str) -> int:
    length = 0
    for prefix, size in _PREFIX_LENGTHS:
        if _has_prefix(url, prefix):
            length = size
    return length


def _is_hex(raw: bytes, index: int) -> bool:
    return index < len(raw) and chr(raw[index]) in _HEX


def url_escape(text: str) -> str:
    """Percent-encode unsafe characters in the path of ``text``.

    Escapes of harmless characters are decoded; reserved and unsafe
    escapes are left alone.  URLs that carry a method are returned as is.
    """
    if any(token in text for token in _METHOD_TOKENS):
        return text
    marker = text.find("//")
    host_start = marker + 2 if marker >= 0 else 0
    slash = text.find("/", host_start)
    if slash < 0:
        return text
    prefix = text[:slash + 1]
    raw = text[slash + 1:].encode("utf-8")
    out = bytearray()
    changed = False
    index = 0
    while index < len(raw):
        byte = raw[index]
        if byte == ord("%") and _is_hex(raw, index + 1) and _is_hex(raw, index + 2):
            value = int(raw[index + 1:index + 3], 16)
            if value in _UNSAFE or value in _RESERVED:
                out.append(byte)
                index += 1
            else:
                out.append(value)
                index += 3
                changed = True
        elif byte == ord("%") or (byte in _UNSAFE and byte not in _RESERVED):
            out += b"%%%02X" % byte
            index += 1
            changed = True
        else:
            out.append(byte)
            index += 1
    if not changed:
        return text
    return prefix + out.decode("ascii")


class Url:
    """A request target parsed into its parts.

    ``<scheme>://<user>:<password>@<host>:<port>/<path><file>;<params>?<query>#<frag>``
    """

    def __init__(
        self,
        text: str,
        escape: bool = True,
        content_type: str | None = None,
    ) -> None:
        self.id = 0
        self.absolute = ""
        self.scheme = Scheme.HTTP
        self.method = Method.GET
        self.username: str | None = None
        self.password: str | None = None
        self.hostname: str | None = None
        self.port = 80
        self.path: str | None = None
        self.file: str | None = None
        self.parameters: str | None = None
        self.has_parameters = False
        self.query: str | None = None
        self.fragment: str | None = None
        self.request: str | None = None
        self.postdata: str | bytes | None = None
        self.posttemp: str | None = None
        self.cached = False
        self.redirect = False
        self._content_type: str | None = None
        self._default_content_type = content_type
        self._parse(text, escape)

    def __repr__(self) -> str:
        return f"Url({self.absolute!r})"

    # Parsing

    def _parse(self, text: str, escape: bool) -> None:
        if empty(text):
            raise ValueError("a URL must not be empty")
        rest = self._set_absolute(url_escape(text) if escape else text)
        rest = self._strip_scheme(rest)

        offset = len(self.absolute) - len(rest)
        for token, method in _BODY_METHODS:
            index = self.absolute.find(token)
            if index >= 0:
                body = self.absolute[index + len(token):]
                self.absolute = self.absolute[:index]
                rest = self.absolute[offset:]
                self.method = method
                self._parse_post_data(body)
                break
        else:
            self.method = Method.GET
            self.postdata = None
            self.posttemp = None

        if self._has_credentials(rest):
            rest = self._set_username(rest)
            rest = self._set_password(rest)
        rest = self._set_hostname(rest)
        rest = self._set_port(rest)
        rest = self._set_path(rest)
        rest = self._set_file(rest)
        rest = self._set_parameters(rest)
        rest = self._set_query(rest)
        self._set_fragment(rest)

    def _set_absolute(self, url: str) -> str:
        scheme = "http"
        for prefix in ("http:", "https:", "ftp:"):
            if _has_prefix(url, prefix):
                scheme = prefix[:-1]
        if _SCHEME_PREFIX.match(url):
            self.absolute = url
        elif "/" in url:
            self.absolute = f"{scheme}://{url}"
        else:
            self.absolute = f"{scheme}://{url}/"
        return self.absolute

    def _strip_scheme(self, url: str) -> str:
        if _has_prefix(self.absolute, "http:"):
            self.scheme = Scheme.HTTP
            return url[7:]
        if _has_prefix(self.absolute, "https:"):
            self.scheme = Scheme.HTTPS
            return url[8:]
        if _has_prefix(self.absolute, "ftp:"):
            self.scheme = Scheme.FTP
            return url[6:]
        self.scheme = Scheme.UNSUPPORTED
        return url

    def _parse_post_data(self, data: str) -> None:
        data = data.lstrip(_WHITESPACE)
        if data.startswith("<"):
            self.set_postdata(Path(data[1:].strip(_WHITESPACE)).read_bytes())
            return
        self.postdata = data
        self._content_type = self._fallback_content_type()

    @staticmethod
    def _has_credentials(text: str) -> bool:
        match = _CREDENTIAL_STOP.search(text)
        return match is not None and match.group() == "@"

    @staticmethod
    def _credentials_ahead(text: str) -> bool:
        at = text.find("@")
        slash = text.find("/")
        return at >= 0 and not (slash >= 0 and at >= slash)

    def _set_username(self, text: str) -> str:
        if not self._credentials_ahead(text):
            return text
        index = _scan(text, ":@/")
        if index >= len(text) or text[index] not in ":@":
            return text
        self.username = text[:index]
        return text[index + 1:]

    def _set_password(self, text: str) -> str:
        if not self._credentials_ahead(text):
            return text
        index = text.index("@")
        self.password = text[:index]
        return text[index + 1:]

    def _set_hostname(self, text: str) -> str:
        if text.startswith("//"):
            text = text[2:]
        if text.startswith("["):
            close = text.find("]")
            index = len(text) if close < 0 else close + 1
        else:
            index = _scan(text, "/#:")
        self.hostname = text[:index]
        if text[index:index + 1] == ":":
            return text[index + 1:]
        return text[index:]

    def _set_port(self, text: str) -> str:
        self.port = _DEFAULT_PORTS.get(self.scheme, 80)
        digits = len(text) - len(text.lstrip("0123456789"))
        if digits == 0:
            return text
        self.port = int(text[:digits])
        return text[digits:]

    def _set_path(self, text: str) -> str:
        if text.startswith("#"):
            self.request = "/"
            return text
        request = text.split("#", 1)[0]
        last = text.rfind("/")
        index = last if last > 0 else 0
        if text[index:index + 1] != "/":
            if self.scheme == Scheme.FTP:
                self.path = ""
            else:
                self.path = "/"
                request = "/"
        else:
            path = text[:index + 1]
            if self.scheme == Scheme.FTP and path.startswith("/"):
                path = path[1:]
            self.path = path
        self.request = trim(request)
        return text[index + 1:]

    def _set_file(self, text: str) -> str:
        index = _scan(text, ";?" + _WHITESPACE)
        self.file = trim(text[:index])
        stop = text[index:index + 1]
        if stop == ";":
            self.has_parameters = True
            return text[index + 1:]
        if stop == "?":
            return text[index + 1:]
        return text[index:]

    def _set_parameters(self, text: str) -> str:
        if not self.has_parameters:
            self.parameters = ""
            return text
        index = _scan(text, "?" + _WHITESPACE)
        self.parameters = text[:index]
        if text[index:index + 1] == "?":
            return text[index + 1:]
        return text[index:]

    def _set_query(self, text: str) -> str:
        index = _scan(text, "#" + _WHITESPACE)
        self.query = text[:index]
        if text[index:index + 1] == "#":
            return text[index + 1:]
        return text[index:]

    def _set_fragment(self, text: str) -> None:
        self.fragment = text[:_scan(text, _WHITESPACE)]

    # Derived values

    def _fallback_content_type(self) -> str:
        if not empty(self._default_content_type):
            return str(self._default_content_type)
        return DEFAULT_CONTENT_TYPE

    @property
    def content_type(self) -> str:
        """The body's content type; a default is recorded on first use."""
        if self._content_type is None:
            self._content_type = self._fallback_content_type()
        return self._content_type

    @content_type.setter
    def content_type(self, value: str) -> None:
        self._content_type = value

    @property
    def postlen(self) -> int:
        return 0 if self.postdata is None else len(self.postdata)

    @property
    def scheme_name(self) -> str:
        return _SCHEME_NAMES.get(self.scheme, "unsupported")

    @property
    def method_name(self) -> str:
        return _METHOD_NAMES.get(self.method, "GET")

    # Changes

    def set_scheme(self, scheme: Scheme) -> None:
        """Replace the scheme, rewriting the absolute URL to match."""
        self.scheme = Scheme(scheme)
        if self.absolute:
            rest = self.absolute[_prefix_length(self.absolute):]
            self.absolute = f"{self.scheme_name}://{rest}"

    def set_hostname(self, hostname: str | None) -> None:
        """Set the host name; blank names are ignored."""
        if empty(hostname):
            return
        self.hostname = hostname

    def set_postdata(self, data: str | bytes) -> None:
        """Use ``data`` as the request body."""
        self.postdata = data

    def display(self, full_url: bool = False) -> str | None:
        """The text to show for this URL in reports."""
        if full_url or self.method != Method.GET:
            return self.absolute
        return self.request

    def dump(self) -> None:
        """Print every part of the URL to standard output."""
        lines = [
            f"URL ID:    {self.id}",
            f"Absolute:  {self.absolute}",
            f"Scheme:    {self.scheme_name}",
            f"Method:    {self.method_name}",
            f"Username:  {self.username}",
            f"Password:  {self.password}",
            f"Hostname:  {self.hostname}",
            f"Port:      {self.port}",
            f"Path:      {self.path}",
            f"File:      {self.file}",
            f"Request:   {self.request}",
        ]
        if self.has_parameters:
            lines.append(f"Params:   {self.parameters}")
        lines += [
            f"Query:     {self.query}",
            f"Fragment:  {self.fragment}",
            f"Post Len:  {self.postlen}",
            f"Post Data: {self.postdata}",
            f"Cont Type: {self.content_type}",
        ]
        sys.stdout.write("\n".join(lines) + "\n")
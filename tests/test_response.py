import pytest

from siegekit.response import (
    AuthType,
    Connection,
    ContentEncoding,
    Response,
    TransferEncoding,
)


@pytest.fixture
def response():
    return Response()


def test_defaults_without_status(response):
    assert response.code == 418
    assert response.protocol == "HTTP/1.1"
    assert response.success() is False
    assert response.failure() is True


def test_status_line(response):
    assert response.parse_status_line("HTTP/1.1 200 OK") is True
    assert response.code == 200
    assert response.protocol == "HTTP/1.1"
    assert response.success() is True
    assert response.failure() is False


def test_status_line_other_protocol(response):
    assert response.parse_status_line("HTTP/1.0 404 Not Found") is True
    assert response.protocol == "HTTP/1.0"
    assert response.code == 404
    assert response.failure() is True
    assert response.success() is False


@pytest.mark.parametrize("line", ["HTTP/1.1 401 Unauthorized", "HTTP/1.1 407 Proxy"])
def test_auth_codes_count_as_success(response, line):
    response.parse_status_line(line)
    assert response.success() is True
    assert response.failure() is False


def test_non_http_status_line_rejected(response):
    assert response.parse_status_line("FTP/1.1 200 OK") is False
    assert response.code == 418


def test_content_type_with_charset(response):
    assert response.parse_content_type("Content-Type: text/html; charset=utf-8") is True
    assert response.content_type == "text/html"
    assert response.charset == "utf-8"


def test_content_type_plain(response):
    assert response.parse_content_type("Content-Type: image/png") is True
    assert response.content_type == "image/png"
    assert response.charset == "iso-8859-1"


def test_content_type_default(response):
    assert response.content_type == "unknown"


def test_content_length(response):
    assert response.parse_content_length("Content-Length: 1024") is True
    assert response.content_length == 1024


def test_content_length_too_small_ignored(response):
    assert response.parse_content_length("Content-Length: 1") is False
    assert response.content_length == 0


def test_content_length_wrong_header(response):
    assert response.parse_content_length("Content-Type: 1024") is False
    assert response.content_length == 0


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Content-Encoding: gzip", ContentEncoding.GZIP),
        ("Content-Encoding: deflate", ContentEncoding.DEFLATE),
    ],
)
def test_content_encoding(response, line, expected):
    assert response.parse_content_encoding(line) is True
    assert response.content_encoding is expected


def test_content_encoding_unknown(response):
    assert response.parse_content_encoding("Content-Encoding: br") is False
    assert response.content_encoding is None


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Transfer-Encoding: chunked", TransferEncoding.CHUNKED),
        ("Transfer-Encoding: trailer ", TransferEncoding.TRAILER),
        ("Transfer-Encoding: identity", TransferEncoding.NONE),
    ],
)
def test_transfer_encoding(response, line, expected):
    assert response.parse_transfer_encoding(line) is True
    assert response.transfer_encoding is expected


def test_transfer_encoding_default(response):
    assert response.parse_transfer_encoding("Connection: close") is False
    assert response.transfer_encoding is TransferEncoding.NONE


def test_location(response):
    assert response.parse_location("Location: http://example.com/next") is True
    assert response.location == "http://example.com/next"
    assert response.redirect is True


def test_content_location(response):
    assert response.parse_location("Content-Location: /other.html") is True
    assert response.location == "/other.html"


def test_location_unrelated_line(response):
    assert response.parse_location("Server: test") is False
    assert response.location is None
    assert response.redirect is False


def test_connection(response):
    assert response.connection is Connection.CLOSE
    assert response.parse_connection("Connection: keep-alive") is True
    assert response.connection is Connection.KEEPALIVE
    assert response.parse_connection("Connection: close") is True
    assert response.connection is Connection.CLOSE


def test_connection_unrelated_line(response):
    assert response.parse_connection("Server: test") is False


def test_keepalive(response):
    assert response.parse_keepalive("Keep-Alive: timeout=30, max=100") is True
    assert response.keepalive_timeout == 30
    assert response.keepalive_max == 100


def test_keepalive_defaults(response):
    assert response.keepalive_timeout == 15
    assert response.keepalive_max == 5


def test_keepalive_zero_keeps_default(response):
    assert response.parse_keepalive("Keep-Alive: timeout=0") is True
    assert response.keepalive_timeout == 15


def test_keepalive_without_pairs(response):
    assert response.parse_keepalive("Keep-Alive:") is False
    assert response.keepalive_max == 5


def test_last_modified(response):
    line = "Last-Modified: Wed, 21 Oct 2015 07:28:00 GMT"
    assert response.parse_last_modified(line) is True
    assert response.last_modified == "Wed, 21 Oct 2015 07:28:00 GMT"
    assert response.parse_last_modified("ETag: x") is False


def test_etag_dequoted(response):
    assert response.parse_etag('ETag: "abc123"') is True
    assert response.etag == "abc123"


def test_etag_missing(response):
    assert response.parse_etag("Server: test") is False
    assert response.etag is None


def test_www_authenticate_basic(response):
    assert response.parse_www_authenticate('WWW-Authenticate: Basic realm="Secure Area"') is True
    assert response.www_auth_type is AuthType.BASIC
    assert response.www_auth_realm == "Secure Area"
    assert response.www_auth_challenge is None


def test_www_authenticate_digest(response):
    line = 'WWW-Authenticate: Digest realm="testrealm", nonce="abc"'
    assert response.parse_www_authenticate(line) is True
    assert response.www_auth_type is AuthType.DIGEST
    assert response.www_auth_realm == "testrealm"
    assert response.www_auth_challenge == line[18:]


def test_www_authenticate_ntlm(response):
    assert response.parse_www_authenticate("WWW-Authenticate: NTLM") is True
    assert response.www_auth_type is AuthType.NTLM
    assert response.www_auth_challenge == "NTLM"


def test_www_authenticate_basic_after_digest_keeps_digest(response):
    response.parse_www_authenticate('WWW-Authenticate: Digest realm="testrealm", nonce="abc"')
    response.parse_www_authenticate('WWW-Authenticate: Basic realm="other"')
    assert response.www_auth_type is AuthType.DIGEST
    assert response.www_auth_realm == "testrealm"


def test_www_authenticate_unrelated_line(response):
    assert response.parse_www_authenticate("Server: test") is True
    assert response.www_auth_type is None


def test_proxy_authenticate_basic(response):
    assert response.parse_proxy_authenticate('Proxy-Authenticate: Basic realm="proxy"') is True
    assert response.proxy_auth_type is AuthType.BASIC
    assert response.proxy_auth_realm == "proxy"


def test_proxy_authenticate_digest(response):
    line = 'Proxy-Authenticate: Digest realm="gate", nonce="n"'
    assert response.parse_proxy_authenticate(line) is True
    assert response.proxy_auth_type is AuthType.DIGEST
    assert response.proxy_auth_realm == "gate"
    assert response.proxy_auth_challenge == line[20:]


def test_from_cache_flag(response):
    assert response.from_cache is False
    response.from_cache = True
    assert response.from_cache is True
import pytest

from siegekit.util import (
    RAND_MAX,
    PosixRandom,
    elapsed_time,
    endswith,
    lowercase,
    okay,
    parse_time,
    startswith,
    stristr,
    strmatch,
    strncasestr,
    substring,
    uppercase,
    urandom,
)


def test_parse_time_seconds():
    assert parse_time("10s") == (1, 10)


def test_parse_time_hours():
    assert parse_time("1H") == (1, 3600)


def test_parse_time_minutes_match_seconds():
    assert parse_time("2m").secs == parse_time("120s").secs
    assert parse_time("2m").time == 1


def test_parse_time_bare_number_is_minutes():
    result = parse_time("5")
    assert result.secs == parse_time("5m").secs
    assert result.time == 5


def test_parse_time_without_digits():
    assert parse_time("abc") == (0, 0)


def test_substring_basic():
    assert substring("hello world", 6, 5) == "world"


def test_substring_clamps_length():
    assert substring("hello", 3, 10) == "lo"


@pytest.mark.parametrize("start,length", [(0, 0), (-1, 2), (6, 1)])
def test_substring_invalid(start, length):
    assert substring("hello", start, length) is None


@pytest.mark.parametrize(
    "code,expected", [(99, False), (100, True), (200, True), (299, True), (300, False)]
)
def test_okay(code, expected):
    assert okay(code) is expected


def test_strmatch():
    assert strmatch("Content-Type", "content-type") is True
    assert strmatch("abc", "abcd") is False
    assert strmatch("abcd", "abc") is False


def test_startswith_and_endswith():
    assert startswith("ht", "http") is True
    assert startswith("HT", "http") is False
    assert startswith("https", "http") is False
    assert endswith("/", "/path/") is True
    assert endswith("/", "/path") is False
    assert endswith("/", None) is False


def test_uppercase_prefix_only():
    assert uppercase("hello", 3) == "HELlo"


def test_lowercase_roundtrip():
    text = "MiXeD"
    assert lowercase(uppercase(text, len(text)), len(text)) == text.lower()


def test_stristr():
    assert stristr("Hello World", "WORLD") == "World"
    assert stristr("Hello", "xyz") is None
    assert stristr("Hello", "") == "Hello"


def test_strncasestr():
    assert strncasestr("abcdef", "CD", 4) == "cdef"
    assert strncasestr("abcdef", "EF", 4) is None
    assert strncasestr("", "a", 4) is None
    assert strncasestr("abc", "", 4) is None
    assert strncasestr("ab", "abc", 10) is None


def test_elapsed_time_is_linear():
    assert elapsed_time(0) == 0.0
    assert elapsed_time(200) == pytest.approx(2 * elapsed_time(100))
    assert elapsed_time(100) > 0


def test_urandom_range():
    for _ in range(20):
        value = urandom()
        assert -(2**31) <= value < 2**31


def test_posix_random_seed_zero():
    assert PosixRandom(0).next() == 12345


def test_posix_random_deterministic_and_bounded():
    first = PosixRandom(42)
    second = PosixRandom(42)
    values = [first.next() for _ in range(50)]
    assert values == [next(second) for _ in range(50)]
    assert all(0 <= v <= RAND_MAX for v in values)
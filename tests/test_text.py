from siegekit.text import chomp, empty, ltrim, rtrim, split, trim, word_count


def test_chomp_removes_one_newline():
    assert chomp("line\n") == "line"
    assert chomp("line\n\n") == "line\n"
    assert chomp("line") == "line"
    assert chomp("") == ""


def test_rtrim_and_ltrim():
    assert rtrim("  a b \t\n") == "  a b"
    assert ltrim(" \t a b  ") == "a b  "


def test_trim():
    assert trim("\r\n  value \v\f") == "value"
    assert trim("   ") == ""


def test_empty():
    assert empty(None) is True
    assert empty("") is True
    assert empty("  \t\n") is True
    assert empty(" x ") is False


def test_word_count():
    assert word_count(",", ",a,,bc,") == 2
    assert word_count(",", "") == 0
    assert word_count(" ", "one") == 1


def test_split_drops_empty_fields():
    assert split(",", ",a,,bc,") == ["a", "bc"]
    assert split(",", ",,,") == []


def test_split_length_matches_word_count():
    for text in ["a b  c", " lead", "trail ", "", "x"]:
        assert len(split(" ", text)) == word_count(" ", text)


def test_split_join_roundtrip():
    words = ["alpha", "beta", "gamma"]
    assert split(":", ":".join(words)) == words
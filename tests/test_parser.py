import pytest

from siegekit.normalize import url_normalize_string
from siegekit.parser import parse_html
from siegekit.url import Url


@pytest.fixture
def base():
    return Url("http://example.com/dir/")


def absolutes(urls):
    return [url.absolute for url in urls]


def test_image_is_resolved_against_base(base):
    found = parse_html(base, '<html><img src="a.png"></html>')
    assert absolutes(found) == [url_normalize_string(base, "a.png")]
    assert found[0].hostname == "example.com"
    assert found[0].file == "a.png"


def test_empty_page_yields_nothing(base):
    assert parse_html(base, "") == []


def test_anchor_and_frame_are_not_followed(base):
    page = '<a href="/next.html">x</a><frame src="f.html">'
    assert parse_html(base, page) == []


def test_duplicates_are_dropped_ignoring_case(base):
    page = '<img src="a.png"><img src="a.png"><img src="A.PNG">'
    assert len(parse_html(base, page)) == 1


def test_order_of_first_appearance(base):
    page = '<img src="a.png"><script src="b.js"></script>'
    assert absolutes(parse_html(base, page)) == [
        url_normalize_string(base, "a.png"),
        url_normalize_string(base, "b.js"),
    ]


def test_commented_out_tags_are_ignored(base):
    page = '<p><!-- <img src="hidden.png"> --></p>'
    assert parse_html(base, page) == []


def test_empty_and_inline_images_are_skipped(base):
    page = '<img src=""><img src="data:image/png;base64,AAAA">'
    assert parse_html(base, page) == []


def test_image_with_src_after_other_attributes(base):
    found = parse_html(base, '<img alt="x" src="b.png">')
    assert absolutes(found) == [url_normalize_string(base, "b.png")]


def test_image_ending_in_plus_is_skipped(base):
    assert parse_html(base, '<img src="a+">') == []


def test_absolute_script_source(base):
    found = parse_html(base, '<script src="http://cdn.example.com/app.js"></script>')
    assert absolutes(found) == ["http://cdn.example.com/app.js"]
    assert found[0].hostname == "cdn.example.com"


def test_inline_script_expression_is_skipped(base):
    assert parse_html(base, '<script src="+x"></script>') == []


def test_stylesheet_link_is_followed(base):
    found = parse_html(base, '<link rel="stylesheet" type="text/css" href="/style.css" />')
    assert absolutes(found) == [url_normalize_string(base, "/style.css")]


def test_alternate_link_is_not_followed(base):
    assert parse_html(base, '<link rel="alternate" href="/feed.xml">') == []


def test_body_background(base):
    found = parse_html(base, '<body background="bg.png">')
    assert absolutes(found) == [url_normalize_string(base, "bg.png")]


def test_background_outside_body_is_ignored(base):
    assert parse_html(base, '<table background="bg.png">') == []


def test_backslashes_are_removed(base):
    found = parse_html(base, '<img src=\\"a.png\\">')
    assert absolutes(found) == [url_normalize_string(base, "a.png")]
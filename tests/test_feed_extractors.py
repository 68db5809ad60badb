from __future__ import annotations

import pytest

from baseline_timeline.services.feed_extractors import extract_content, extract_link, strip_html


def test_extract_link_plain_string():
    assert extract_link("https://x/page") == "https://x/page"


def test_extract_link_attributed_object():
    assert extract_link({"rel": "alternate", "href": "https://x/alt"}) == "https://x/alt"


def test_extract_link_prefers_non_self_relation():
    links = [
        {"rel": "self", "href": "https://x/self"},
        {"rel": "alternate", "href": "https://x/alt"},
    ]
    assert extract_link(links) == "https://x/alt"


def test_extract_link_falls_back_to_first_self_link():
    assert extract_link([{"rel": "self", "href": "https://x/self"}]) == "https://x/self"


def test_extract_link_picks_first_match_in_document_order():
    links = [
        {"rel": "self", "href": "https://x/self"},
        {"href": "https://x/no-rel"},
        {"rel": "alternate", "href": "https://x/alt"},
    ]
    assert extract_link(links) == "https://x/no-rel"


def test_extract_link_string_inside_list():
    assert extract_link(["https://x/a", {"rel": "alternate", "href": "https://x/b"}]) == "https://x/a"


@pytest.mark.parametrize(
    "node",
    [None, "", [], {}, {"rel": "alternate"}, {"href": ""}, 42, [None], [{"rel": "self"}]],
)
def test_extract_link_unresolvable_yields_empty_string(node):
    assert extract_link(node) == ""


def test_extract_link_stringifies_href():
    assert extract_link({"href": 123}) == "123"


def test_extract_content_plain_string():
    assert extract_content("<p>Hi</p>") == "<p>Hi</p>"


def test_extract_content_key_preference_order():
    assert extract_content({"#text": "text", "cdata": "cdata", "value": "value"}) == "text"
    assert extract_content({"cdata": "cdata", "value": "value"}) == "cdata"
    assert extract_content({"value": "value"}) == "value"


def test_extract_content_skips_empty_candidates():
    assert extract_content({"type": "html", "#text": "", "cdata": "", "value": "v"}) == "v"


@pytest.mark.parametrize("node", [None, "", {}, {"type": "html"}, ["<p>x</p>"]])
def test_extract_content_missing_payload(node):
    assert extract_content(node) == ""


def test_strip_html_removes_tags_and_collapses_whitespace():
    html = "<p>CSS   <strong>grid</strong>\n\tlayout</p>"
    assert strip_html(html) == "CSS grid layout"


def test_strip_html_removes_unterminated_trailing_tag():
    assert strip_html("Hello <a href='x'") == "Hello"


def test_strip_html_decodes_entities():
    assert strip_html("A &amp; B &#38;&#x26; C") == "A & B && C"


def test_strip_html_named_entities():
    assert strip_html("&lt;div&gt; &quot;q&quot; it&#39;s") == "<div> \"q\" it's"


def test_strip_html_nbsp_becomes_single_space():
    assert strip_html("a&nbsp;b") == "a b"
    assert strip_html("a &nbsp; b") == "a b"


def test_strip_html_does_not_double_decode():
    assert strip_html("&amp;lt;") == "&lt;"


def test_strip_html_escaped_markup_is_not_stripped():
    assert strip_html("Use &lt;dialog&gt; now") == "Use <dialog> now"


def test_strip_html_astral_code_point():
    assert strip_html("&#x1F600;") == "\U0001F600"


def test_strip_html_out_of_range_reference_left_alone():
    assert strip_html("&#x110000;") == "&#x110000;"


@pytest.mark.parametrize("reference", ["&#xD800;", "&#xdfff;", "&#55296;", "&#57343;"])
def test_strip_html_surrogate_reference_left_alone(reference):
    text = strip_html(f"bad {reference} ref")
    assert text == f"bad {reference} ref"
    text.encode("utf-8")


def test_strip_html_huge_decimal_reference_left_alone():
    assert strip_html("&#99999999999999999999;") == "&#99999999999999999999;"


def test_strip_html_adjacent_nbsp_collapse_to_one_space():
    assert strip_html("a&nbsp;&nbsp;b") == "a b"


def test_strip_html_empty():
    assert strip_html("") == ""
    assert strip_html("   ") == ""


@pytest.mark.parametrize(
    "html",
    [
        "<p>The <code>:has()</code> pseudo-class</p>",
        "A &amp; B &#38;&#x26; C",
        "  lots\n\nof   <br/> space &nbsp; here ",
        "caf&#233; &#x2014; cr&egrave;me",
    ],
)
def test_strip_html_is_idempotent(html):
    once = strip_html(html)
    assert strip_html(once) == once

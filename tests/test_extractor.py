from __future__ import annotations

from html_formatter.config import FormatterConfig
from html_formatter.constants import ATTRIBUTE, INLINE
from html_formatter.extractor import (
    deep_extract,
    extract,
    make_placeholder,
    normalize_whitespace,
    restore,
)
from html_formatter.models import Content
from html_formatter.patterns import ATTRIBUTE_PATTERN, CDATA_PATTERN, build_pattern_library


def test_make_placeholder_lowercases_and_strips_spaces():
    assert make_placeholder("Inline Tag").format(3) == "ᐃinlinetag:3:inlinetagᐃ"
    assert make_placeholder("attr").format(0) == "ᐃattr:0:attrᐃ"


def test_normalize_whitespace_collapses_runs():
    assert normalize_whitespace("a \t\n  b\r\nc") == "a b c"
    assert normalize_whitespace("") == ""


def test_extract_replaces_every_match_with_indexed_marker():
    content = Content('<a href="x" title="y">')

    extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN)

    assert content.text == "<a ᐃattr:0:attrᐃ ᐃattr:1:attrᐃ>"
    assert content.parts[ATTRIBUTE] == ['href="x"', 'title="y"']


def test_extract_handles_identical_matches_separately():
    content = Content('<a x="1"><b x="1">')

    extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN)

    assert content.text == "<a ᐃattr:0:attrᐃ><b ᐃattr:1:attrᐃ>"
    assert content.parts[ATTRIBUTE] == ['x="1"', 'x="1"']


def test_extract_applies_transform_to_stored_part():
    content = Content("<![CDATA[ a ]]>")

    extract(content, "cdata", CDATA_PATTERN, lambda match: match.group(1).strip())

    assert content.text == "ᐃcdata:0:cdataᐃ"
    assert content.parts["cdata"] == ["a"]


def test_extract_discards_previous_parts_of_category():
    content = Content('<a x="1">', parts={ATTRIBUTE: ["stale"]})

    extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN)

    assert content.parts[ATTRIBUTE] == ['x="1"']


def test_extract_without_matches_leaves_text_unchanged():
    content = Content("<p>plain</p>")

    extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN)

    assert content.text == "<p>plain</p>"
    assert content.parts[ATTRIBUTE] == []


def test_deep_extract_reaches_fixpoint_on_nested_inline_elements():
    library = build_pattern_library(FormatterConfig())
    content = Content("<b><i>x</i></b>")

    deep_extract(content, INLINE, library.inline)

    assert content.text == "ᐃinline:1:inlineᐃ"
    assert content.parts[INLINE] == ["<i>x</i>", "<b>ᐃinline:0:inlineᐃ</b>"]


def test_restore_expands_nested_markers():
    library = build_pattern_library(FormatterConfig())
    content = Content("<p><b><i>x</i></b> and <em>y</em></p>")

    deep_extract(content, INLINE, library.inline)
    restore(content, INLINE)

    assert content.text == "<p><b><i>x</i></b> and <em>y</em></p>"
    assert INLINE not in content.parts


def test_restore_replaces_high_indices_first():
    placeholder = make_placeholder(ATTRIBUTE)
    parts = [f"part{index}" for index in range(12)]
    content = Content(
        " ".join(placeholder.format(index) for index in range(12)),
        parts={ATTRIBUTE: parts},
    )

    restore(content, ATTRIBUTE)

    assert content.text == " ".join(parts)


def test_restore_unknown_category_is_noop():
    content = Content("ᐃpre:0:preᐃ")

    restore(content, "pre")

    assert content.text == "ᐃpre:0:preᐃ"

from __future__ import annotations

import pytest

from html_formatter.config import FormatterConfig
from html_formatter.models import Action
from html_formatter.patterns import (
    ATTRIBUTE_PATTERN,
    IS_CLOSING,
    IS_DOCTYPE,
    IS_EMPTY_CLOSING,
    IS_MARKER,
    IS_OPENING,
    IS_TEXT,
    NEVER_MATCH,
    SPACE_BETWEEN_TAGS,
    build_pattern_library,
    tag_alternation,
)


def test_tag_alternation_puts_longer_names_first():
    assert tag_alternation(["b", "br"]) == "br|b"


def test_tag_alternation_of_nothing_never_matches():
    assert tag_alternation([]) == NEVER_MATCH
    assert tag_alternation(["", "  "]) == NEVER_MATCH


def test_tag_alternation_escapes_names():
    assert tag_alternation(["svg:rect"]) == r"svg:rect"
    assert tag_alternation(["my-tag"]) == r"my\-tag"


def test_rules_are_in_priority_order():
    library = build_pattern_library(FormatterConfig())

    assert [rule.name for rule in library.rules] == [
        "DOCTYPE",
        "BLOCK TAG",
        "SELF CLOSING",
        "MARKER",
        "OPENING TAG",
        "CLOSING TAG",
        "CLOSING EMPTY TAG",
        "WHITESPACE",
        "TEXT",
    ]
    actions = {rule.name: rule.action for rule in library.rules}
    assert actions["OPENING TAG"] is Action.INCREASE_INDENT
    assert actions["CLOSING TAG"] is Action.DECREASE_INDENT
    assert actions["WHITESPACE"] is Action.DISCARD


@pytest.mark.parametrize(
    "text",
    ["<br>", "<br/>", '<img ᐃattr:0:attrᐃ>', "<input></input>", "<BR>"],
)
def test_self_closing_rule_matches_void_elements(text: str):
    library = build_pattern_library(FormatterConfig())
    self_closing = library.rules[2].pattern

    match = self_closing.match(text)

    assert match is not None
    assert match.group(0) == text


def test_self_closing_rule_respects_word_boundary():
    library = build_pattern_library(FormatterConfig(self_closing_tags=("br",)))

    assert library.rules[2].pattern.match("<bride>") is None


def test_opening_rule_skips_closing_and_empty_tags():
    assert IS_OPENING.match("<div class>").group(0) == "<div class>"
    assert IS_OPENING.match("<div/>") is None
    assert IS_OPENING.match("</div>") is None
    assert IS_OPENING.match("<!DOCTYPE html>") is None


def test_closing_and_empty_closing_rules():
    assert IS_CLOSING.match("</div >").group(0) == "</div >"
    assert IS_EMPTY_CLOSING.match("<x-icon ᐃattr:0:attrᐃ/>") is not None


def test_marker_rule_requires_matching_category():
    assert IS_MARKER.match("ᐃinline:12:inlineᐃ").group(0) == "ᐃinline:12:inlineᐃ"
    assert IS_MARKER.match("ᐃinline:12:attrᐃ") is None


def test_text_rule_stops_at_markup():
    assert IS_TEXT.match("Hello world<b>").group(0) == "Hello world"
    assert IS_TEXT.match("> stray") is None
    assert IS_TEXT.match(" leading space") is None


def test_text_rule_accepts_closing_bracket_inside_a_run():
    assert IS_TEXT.match("a > b<p>").group(0) == "a > b"
    assert IS_TEXT.match("Step 1 -> Step 2<br>").group(0) == "Step 1 -> Step 2"


def test_doctype_rule_takes_whole_comment():
    assert IS_DOCTYPE.match("<!-- <p>old</p> --><p>").group(0) == "<!-- <p>old</p> -->"
    assert IS_DOCTYPE.match("<!DOCTYPE html><html>").group(0) == "<!DOCTYPE html>"


def test_attribute_pattern_accepts_spaces_around_equals():
    match = ATTRIBUTE_PATTERN.search("<p href = 'b'>")

    assert match.groups() == ("href", "'", "b")


def test_preformatted_pattern_is_case_insensitive():
    library = build_pattern_library(FormatterConfig())

    match = library.preformatted.search("<PRE class='x'> a </pre>")

    assert match.group(1) == "PRE"
    assert match.group(2) == " a "


def test_empty_inline_list_disables_inline_pattern():
    library = build_pattern_library(FormatterConfig(inline_tags=()))

    assert library.inline.search("<span>x</span>") is None


def test_move_to_left_only_matches_bodies_starting_on_new_line():
    library = build_pattern_library(FormatterConfig())

    assert library.move_to_left.sub(r"\1", "        <pre>\nx</pre>") == "<pre>\nx</pre>"
    assert library.move_to_left.sub(r"\1", "    <pre>x</pre>") == "    <pre>x</pre>"


def test_space_between_tags_includes_protected_blocks():
    text = "<div> ᐃpre:0:preᐃ \n<p>"

    assert SPACE_BETWEEN_TAGS.sub(r"\1", text) == "<div>ᐃpre:0:preᐃ<p>"


def test_space_between_tags_captures_both_neighbours():
    match = SPACE_BETWEEN_TAGS.search("<p><b>a</b> <i>b</i></p>")

    assert match.group(1) == "</b>"
    assert match.group(2) == "<i>"


@pytest.mark.parametrize(
    ("tag", "expected"),
    [("<b>", True), ("</span>", True), ("<IMG src>", True), ("<body>", False), ("<bdi>", False)],
)
def test_inline_tag_pattern(tag: str, expected: bool):
    library = build_pattern_library(FormatterConfig())

    assert bool(library.inline_tag.match(tag)) is expected


def test_pattern_library_is_cached_per_configuration():
    assert build_pattern_library(FormatterConfig()) is build_pattern_library(FormatterConfig())
    assert build_pattern_library(FormatterConfig(tab="\t")) is not build_pattern_library(
        FormatterConfig()
    )

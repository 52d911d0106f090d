"""Regular expressions used to extract, indent, and compact HTML content."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from .config import FormatterConfig
from .constants import CDATA, MARKER, PRE
from .models import Action, Rule

# Templates interpolated with a tag-name alternation
PRE_TEMPLATE = r"<({tags})\b[^>]*>([\s\S]*?)</\1\s*>"
INLINE_TEMPLATE = r"<({tags})\b([^>]*)>([^<]*)</\1\s*>"
SELF_CLOSING_TEMPLATE = r"<({tags})\b[^>]*>(?:\s*</\1\s*>)?"
MOVE_TO_LEFT_TEMPLATE = r"^(?:{tab})+(<(?:{tags})\b[^>]*>{line_break})"

# Content patterns
ATTRIBUTE_PATTERN = re.compile(r"([a-z0-9_:.@-]+)\s*=\s*([\"'])([\s\S]*?)\2", re.IGNORECASE)
CDATA_PATTERN = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Indentation patterns, matched at the start of the remaining text
IS_DOCTYPE = re.compile(r"<!--[\s\S]*?-->|<![^>]*>")
IS_BLOCK = re.compile(r"<([a-z][a-z0-9:-]*)\b[^>]*>[^<]*</\1\s*>", re.IGNORECASE)
IS_MARKER = re.compile(rf"{MARKER}([a-z0-9_-]+):[0-9]+:\1{MARKER}")
IS_OPENING = re.compile(r"<[^/!>\s][^>]*(?<!/)>")
IS_CLOSING = re.compile(r"</[^>]*>")
IS_EMPTY_CLOSING = re.compile(r"<[^/!>\s][^>]*/>")
IS_WHITESPACE = re.compile(r"\s+")
# A run may hold `>` but never start with one
IS_TEXT = re.compile(rf"[^<>{MARKER}\s][^<{MARKER}]*")

# Cosmetic cleanups applied after indentation
TRAILING_SPACE_IN_OPENING_TAG = re.compile(r"(<[^/!<>\s][^<>]*?)\s+(/?>)")
SPACE_BEFORE_CLOSING_TAG = re.compile(r"(\S)[ \t]+(</)")
SPACE_AFTER_OPENING_TAG = re.compile(r"(<[^/!<>\s][^<>]*>)[ \t]+(\S)")

# Whitespace between tags (or protected blocks) when minifying
_BLOCK_MARKER = rf"{MARKER}(?:{PRE}|{CDATA}):[0-9]+:(?:{PRE}|{CDATA}){MARKER}"
SPACE_BETWEEN_TAGS = re.compile(
    rf"(<[^<>]*>|{_BLOCK_MARKER})\s+(?=(<[^<>]*>|{_BLOCK_MARKER}))"
)

NEVER_MATCH = "(?!)"


def tag_alternation(tags: Iterable[str]) -> str:
    """Build a regex alternation from tag names.

    Longer names come first so that a name is never shadowed by one of its
    prefixes. An empty list yields a group that never matches.

    Examples:
        tag_alternation(["b", "br"])  # "br|b"
        tag_alternation([])  # "(?!)"
    """
    names = sorted({tag.strip() for tag in tags if tag.strip()}, key=lambda tag: (-len(tag), tag))
    if not names:
        return NEVER_MATCH
    return "|".join(re.escape(name) for name in names)


@dataclass(frozen=True)
class PatternLibrary:
    """Patterns compiled for one formatter configuration.

    Attributes:
        preformatted: Matches a protected element with its whole body.
        inline: Matches an inline element whose body holds no nested tags.
        move_to_left: Matches indentation in front of a restored protected
            element whose body starts with a line break.
        trailing_line_space: Matches spaces before a line break.
        inline_tag: Matches the start of an inline opening or closing tag.
        rules: Indentation rules in priority order.
    """

    preformatted: re.Pattern[str]
    inline: re.Pattern[str]
    move_to_left: re.Pattern[str]
    trailing_line_space: re.Pattern[str]
    inline_tag: re.Pattern[str]
    rules: tuple[Rule, ...]


@lru_cache(maxsize=32)
def build_pattern_library(config: FormatterConfig) -> PatternLibrary:
    """Compile the configuration-dependent patterns and the rule list.

    Args:
        config: Configuration supplying tag lists, tab and line break.

    Returns:
        PatternLibrary: Immutable set of patterns for one configuration. Libraries
        are cached per configuration, so repeated calls are cheap.

    Examples:
        library = build_pattern_library(FormatterConfig(self_closing_tags=("br",)))
    """
    formatted = tag_alternation(tag for tag, _ in config.formatted_tags)
    inline = tag_alternation(config.inline_tags)
    line_break = re.escape(config.line_break)
    tab = re.escape(config.tab) if config.tab else NEVER_MATCH

    self_closing = re.compile(
        SELF_CLOSING_TEMPLATE.format(tags=tag_alternation(config.self_closing_tags)),
        re.IGNORECASE,
    )

    rules = (
        Rule("DOCTYPE", IS_DOCTYPE, Action.KEEP_INDENT),
        Rule("BLOCK TAG", IS_BLOCK, Action.KEEP_INDENT),
        Rule("SELF CLOSING", self_closing, Action.KEEP_INDENT),
        Rule("MARKER", IS_MARKER, Action.KEEP_INDENT),
        Rule("OPENING TAG", IS_OPENING, Action.INCREASE_INDENT),
        Rule("CLOSING TAG", IS_CLOSING, Action.DECREASE_INDENT),
        Rule("CLOSING EMPTY TAG", IS_EMPTY_CLOSING, Action.KEEP_INDENT),
        Rule("WHITESPACE", IS_WHITESPACE, Action.DISCARD),
        Rule("TEXT", IS_TEXT, Action.KEEP_INDENT),
    )

    return PatternLibrary(
        preformatted=re.compile(PRE_TEMPLATE.format(tags=formatted), re.IGNORECASE),
        inline=re.compile(INLINE_TEMPLATE.format(tags=inline), re.IGNORECASE),
        move_to_left=re.compile(
            MOVE_TO_LEFT_TEMPLATE.format(tab=tab, tags=formatted, line_break=line_break),
            re.IGNORECASE | re.MULTILINE,
        ),
        trailing_line_space=re.compile(rf"[ \t]+(?={line_break}|\Z)"),
        inline_tag=re.compile(rf"</?(?:{inline})(?![A-Za-z0-9:-])", re.IGNORECASE),
        rules=rules,
    )

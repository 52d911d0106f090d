"""Indentation engine: classify HTML fragments and assign nesting depth."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .exceptions import IndentError
from .models import Action, IndentLog, Rule
from .patterns import (
    SPACE_AFTER_OPENING_TAG,
    SPACE_BEFORE_CLOSING_TAG,
    TRAILING_SPACE_IN_OPENING_TAG,
    PatternLibrary,
)

logger = logging.getLogger(__name__)


def match_rule(rules: Sequence[Rule], text: str, position: int = 0) -> tuple[Rule, str] | None:
    """Find the first rule matching `text` at `position`.

    Args:
        rules: Rules in priority order.
        text: Text being indented.
        position: Index where the remaining text starts.

    Returns:
        tuple[Rule, str] | None: Matching rule and the literal match, or None
            when no rule applies. Empty matches never count.

    Examples:
        match_rule(library.rules, "<ul><li>")  # (Rule("OPENING TAG", ...), "<ul>")
    """
    for rule in rules:
        match = rule.pattern.match(text, position)
        if match and match.end() > position:
            return rule, match.group(0)
    return None


def apply_action(depth: int, action: Action) -> tuple[int, int]:
    """Compute the indentation level of a line and the depth that follows it.

    Args:
        depth: Current nesting depth.
        action: Action of the matched rule.

    Returns:
        tuple[int, int]: Level used to indent the emitted line, and the depth
            after the line. Neither value is ever negative.

    Examples:
        apply_action(1, Action.INCREASE_INDENT)  # (1, 2)
        apply_action(1, Action.DECREASE_INDENT)  # (0, 0)
        apply_action(0, Action.DECREASE_INDENT)  # (0, 0)
    """
    if action is Action.INCREASE_INDENT:
        return depth, depth + 1
    if action is Action.DECREASE_INDENT:
        depth = max(depth - 1, 0)
    return depth, depth


def indent(
    text: str,
    library: PatternLibrary,
    tab: str,
    line_break: str,
    log: IndentLog | None = None,
) -> str:
    """Put each fragment of `text` on its own line, indented by nesting depth.

    At each step the first rule matching the start of the remaining text is
    applied: its match is consumed and, unless discarded, emitted as
    ``tab * level + match + line_break``. Opening tags print before stepping in,
    closing tags step out before printing. Cosmetic cleanups are applied to
    the assembled output.

    Args:
        text: Content to indent, usually with protected regions replaced by
            markers and whitespace normalized.
        library: Pattern library providing the rules.
        tab: String repeated once per nesting level.
        line_break: String ending every emitted line.
        log: Optional log receiving one entry per step.

    Returns:
        str: Indented content, one fragment per line.

    Raises:
        IndentError: If no rule matches the remaining non-empty text.

    Examples:
        indent("<ul><li>x</li></ul>", library, "    ", "\\n")
        # "<ul>\\n    <li>x</li>\\n</ul>\\n"
    """
    output: list[str] = []
    depth = 0
    position = 0

    while position < len(text):
        found = match_rule(library.rules, text, position)
        if found is None:
            leftover = text[position:]
            logger.debug("No rule matches at offset %d: %.40r", position, leftover)
            raise IndentError("Unable to create the indented content.", leftover)

        rule, matched = found
        if log is not None:
            log.push(rule.name, text[position:], matched)
        logger.debug("%s at depth %d: %.40r", rule.name, depth, matched)

        position += len(matched)
        if rule.action is Action.DISCARD:
            continue

        level, depth = apply_action(depth, rule.action)
        output.append(f"{tab * level}{matched}{line_break}")

    return tidy_output("".join(output), library)


def tidy_output(output: str, library: PatternLibrary) -> str:
    """Remove stray spaces left around tags after indentation."""
    output = TRAILING_SPACE_IN_OPENING_TAG.sub(r"\1\2", output)
    output = SPACE_BEFORE_CLOSING_TAG.sub(r"\1\2", output)
    output = SPACE_AFTER_OPENING_TAG.sub(r"\1\2", output)
    return library.trailing_line_space.sub("", output)

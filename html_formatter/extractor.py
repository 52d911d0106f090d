"""Placeholder-based extraction and restoration of protected content parts."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .constants import MARKER
from .models import Content
from .patterns import WHITESPACE_PATTERN

logger = logging.getLogger(__name__)

Transform = Callable[[re.Match[str]], str]


def make_placeholder(category: str) -> str:
    """Create the marker template for a category.

    The category name is lowercased and stripped of spaces. The template has a
    single ``{}`` slot for the index of the extracted part.

    Args:
        category: Category name, for example ``"attr"``.

    Returns:
        str: Marker template.

    Examples:
        make_placeholder("Inline Tag").format(3)  # "ᐃinlinetag:3:inlinetagᐃ"
    """
    word = category.replace(" ", "").lower()
    return f"{MARKER}{word}:{{}}:{word}{MARKER}"


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run into a single space."""
    return WHITESPACE_PATTERN.sub(" ", text)


def _extract_pass(
    content: Content,
    category: str,
    pattern: re.Pattern[str],
    transform: Transform | None,
) -> int:
    """Replace every match of one scan with a placeholder.

    Matches are replaced at the positions recorded during the scan, so two
    matches with identical text each get their own marker.

    Returns:
        int: Number of parts extracted in this pass.
    """
    placeholder = make_placeholder(category)
    stored = content.parts.setdefault(category, [])
    offset = len(stored)
    found: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        found.append(match.group(0) if transform is None else transform(match))
        return placeholder.format(offset + len(found) - 1)

    content.text = pattern.sub(_replace, content.text)
    stored.extend(found)
    return len(found)


def extract(
    content: Content,
    category: str,
    pattern: re.Pattern[str],
    transform: Transform | None = None,
) -> Content:
    """Move every match of `pattern` into the parts table.

    Any parts previously stored for the category are discarded.

    Args:
        content: Buffer and parts table to update in place.
        category: Category the parts are stored under.
        pattern: Pattern matching the regions to protect.
        transform: Optional callable producing the stored text from a match,
            used to clean up parts before they are restored.

    Returns:
        Content: The updated `content`, for chaining.

    Examples:
        content = extract(Content('<a href="x">'), "attr", ATTRIBUTE_PATTERN)
        content.text  # '<a ᐃattr:0:attrᐃ>'
    """
    content.parts[category] = []
    count = _extract_pass(content, category, pattern, transform)
    logger.debug("Extracted %d %s part(s)", count, category)
    return content


def deep_extract(
    content: Content,
    category: str,
    pattern: re.Pattern[str],
    transform: Transform | None = None,
) -> Content:
    """Extract repeatedly until a pass leaves the buffer unchanged.

    Each pass only catches the innermost remaining constructs (for example an
    inline element whose body no longer holds nested tags once its children
    were replaced with markers), so passes continue until a fixpoint.

    Args:
        content: Buffer and parts table to update in place.
        category: Category the parts are stored under.
        pattern: Pattern matching the regions to protect.
        transform: Optional callable producing the stored text from a match.

    Returns:
        Content: The updated `content`, for chaining.
    """
    content.parts[category] = []
    passes = 0
    while True:
        original = content.text
        _extract_pass(content, category, pattern, transform)
        passes += 1
        if content.text == original:
            break
    logger.debug(
        "Extracted %d %s part(s) in %d pass(es)", len(content.parts[category]), category, passes
    )
    return content


def restore(content: Content, category: str) -> Content:
    """Put the parts of a category back in place of their markers.

    Indices are restored from highest to lowest: a part extracted in a later
    pass may contain markers of earlier parts, which are then restored in turn.
    Restoring a category that was never extracted is a no-op.

    Args:
        content: Buffer and parts table to update in place.
        category: Category to restore.

    Returns:
        Content: The updated `content`, for chaining.
    """
    parts = content.parts.pop(category, None)
    if not parts:
        return content

    placeholder = make_placeholder(category)
    text = content.text
    for index in sorted(range(len(parts)), reverse=True):
        text = text.replace(placeholder.format(index), parts[index])
    content.text = text
    logger.debug("Restored %d %s part(s)", len(parts), category)
    return content

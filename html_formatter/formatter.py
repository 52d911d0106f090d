"""Beautify and minify HTML content."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from .config import FormatterConfig, config_from_mapping, normalize_config, validate_config
from .constants import ATTRIBUTE, CDATA, INLINE, PRE
from .extractor import Transform, deep_extract, extract, normalize_whitespace, restore
from .indenter import indent
from .models import Content, IndentLog
from .patterns import (
    ATTRIBUTE_PATTERN,
    CDATA_PATTERN,
    SPACE_AFTER_OPENING_TAG,
    SPACE_BEFORE_CLOSING_TAG,
    SPACE_BETWEEN_TAGS,
    TRAILING_SPACE_IN_OPENING_TAG,
    PatternLibrary,
    build_pattern_library,
)

logger = logging.getLogger(__name__)


def beautify(
    html: str,
    config: FormatterConfig | Mapping[str, object] | None = None,
    log: IndentLog | None = None,
) -> str:
    """Reformat HTML with one fragment per line, indented by nesting depth.

    Preformatted elements, attributes, CDATA sections and inline elements are
    swapped for markers so that whitespace normalization and indentation
    leave them untouched, then restored in reverse order.

    Args:
        html: Raw HTML markup.
        config: Formatter configuration, or a nested mapping accepted by
            `config_from_mapping`. Defaults to `FormatterConfig()`.
        log: Optional log receiving one entry per indentation step.

    Returns:
        str: Indented HTML without leading or trailing whitespace.

    Raises:
        ConfigError: If the configuration fails validation.
        IndentError: If part of the content matches no indentation rule.

    Examples:
        beautify('<ul><li><input type="text"></li></ul>')
        # '<ul>\\n    <li>\\n        <input type="text">\\n    </li>\\n</ul>'
    """
    config = _prepare_config(config)
    library = build_pattern_library(config)
    content = Content(html)

    _protect(content, config, library, with_breaks=True)
    deep_extract(content, INLINE, library.inline, _inline_transform)

    logger.debug("Indenting %d characters", len(content.text))
    content.text = indent(content.text, library, config.tab, config.line_break, log)

    for category in (INLINE, CDATA, ATTRIBUTE, PRE):
        restore(content, category)

    # Blocks whose body starts on a new line go back to the left margin.
    content.text = library.move_to_left.sub(r"\1", content.text)
    return content.text.strip()


def minify(html: str, config: FormatterConfig | Mapping[str, object] | None = None) -> str:
    """Reduce HTML to a compact form.

    Whitespace runs outside protected regions collapse to a single space, and
    whitespace between tags or around tag contents is dropped. A gap next to
    an inline tag keeps one space, since it shows up in the rendered text. Preformatted
    bodies only receive their `trim` and `cleanup-empty` treatment.

    Args:
        html: Raw HTML markup.
        config: Formatter configuration, or a nested mapping accepted by
            `config_from_mapping`. Defaults to `FormatterConfig()`.

    Returns:
        str: Minified HTML.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        minify('<p class="a"   href = "b" >text</p>')  # '<p class="a" href="b">text</p>'
    """
    config = _prepare_config(config)
    library = build_pattern_library(config)
    content = Content(html)

    _protect(content, config, library, with_breaks=False)
    content.text = compact(content.text, library)

    for category in (CDATA, ATTRIBUTE, PRE):
        restore(content, category)

    return content.text.strip()


def compact(text: str, library: PatternLibrary) -> str:
    """Drop whitespace between tags and around tag contents."""

    def _gap(match: re.Match[str]) -> str:
        left, right = match.group(1), match.group(2)
        if library.inline_tag.match(left) or library.inline_tag.match(right):
            return left + " "
        return left

    text = SPACE_BETWEEN_TAGS.sub(_gap, text)
    text = TRAILING_SPACE_IN_OPENING_TAG.sub(r"\1\2", text)
    text = SPACE_BEFORE_CLOSING_TAG.sub(r"\1\2", text)
    return SPACE_AFTER_OPENING_TAG.sub(r"\1\2", text)


def _prepare_config(config: FormatterConfig | Mapping[str, object] | None) -> FormatterConfig:
    if config is None:
        config = FormatterConfig()
    elif isinstance(config, Mapping):
        config = config_from_mapping(config)
    validate_config(config)
    return normalize_config(config)


def _protect(
    content: Content, config: FormatterConfig, library: PatternLibrary, *, with_breaks: bool
) -> None:
    """Extract preformatted, attribute and CDATA parts and normalize whitespace.

    Attributes and CDATA sections that get cleaned up are extracted after the
    whitespace normalization so that their whitespace is collapsed with the
    rest of the document.
    """
    extract(content, PRE, library.preformatted, _formatted_transform(config, with_breaks))

    attribute_transform = _attribute_transform(config)
    cdata_transform = _cdata_transform(config)

    if not config.attribute_cleanup:
        extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN, attribute_transform)
    if not config.cdata_cleanup:
        extract(content, CDATA, CDATA_PATTERN, cdata_transform)

    content.text = normalize_whitespace(content.text)

    if config.attribute_cleanup:
        extract(content, ATTRIBUTE, ATTRIBUTE_PATTERN, attribute_transform)
    if config.cdata_cleanup:
        extract(content, CDATA, CDATA_PATTERN, cdata_transform)


def _formatted_transform(config: FormatterConfig, with_breaks: bool) -> Transform:
    def transform(match: re.Match[str]) -> str:
        options = config.resolve_formatted(match.group(1))
        body = match.group(2)
        if options.trim:
            body = body.strip()
        if with_breaks and options.opening_break:
            body = _start(body, config.line_break)
        if with_breaks and options.closing_break:
            body = _finish(body, config.line_break)
        if options.cleanup_empty and not body.strip():
            body = ""
        return _replace_groups(match, {2: body})

    return transform


def _attribute_transform(config: FormatterConfig) -> Transform:
    def transform(match: re.Match[str]) -> str:
        name, quote, value = match.groups()
        if config.attribute_cleanup:
            value = normalize_whitespace(value)
        if config.attribute_trim:
            value = value.strip()
        return f"{name}={quote}{value}{quote}"

    return transform


def _cdata_transform(config: FormatterConfig) -> Transform:
    def transform(match: re.Match[str]) -> str:
        body = match.group(1)
        if config.cdata_cleanup:
            body = normalize_whitespace(body)
        if config.cdata_trim:
            body = body.strip()
        return _replace_groups(match, {1: body})

    return transform


def _inline_transform(match: re.Match[str]) -> str:
    attributes = match.group(2).strip()
    return _replace_groups(
        match, {2: f" {attributes}" if attributes else "", 3: match.group(3).strip()}
    )


def _replace_groups(match: re.Match[str], replacements: dict[int, str]) -> str:
    """Rebuild the text of `match` with some capture groups replaced."""
    text = match.group(0)
    base = match.start()
    for group in sorted(replacements, key=match.start, reverse=True):
        start, end = match.span(group)
        text = text[: start - base] + replacements[group] + text[end - base :]
    return text


def _start(value: str, cap: str) -> str:
    """Begin `value` with a single instance of `cap`."""
    return cap + re.sub(rf"^(?:{re.escape(cap)})+", "", value)


def _finish(value: str, cap: str) -> str:
    """End `value` with a single instance of `cap`."""
    return re.sub(rf"(?:{re.escape(cap)})+$", "", value) + cap

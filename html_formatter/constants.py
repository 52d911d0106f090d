"""Constants used across the html-formatter package."""

from __future__ import annotations

# Sentinel wrapped around placeholder markers; unlikely to occur in real HTML.
MARKER = "ᐃ"

# Categories of extracted content parts
PRE = "pre"
ATTRIBUTE = "attr"
CDATA = "cdata"
INLINE = "inline"

DEFAULT_TAB = "    "
DEFAULT_LINE_BREAK = "\n"

DEFAULT_SELF_CLOSING_TAGS = (
    "area",
    "base",
    "br",
    "col",
    "command",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "menuitem",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
    # SVG elements that are usually written without content
    "animate",
    "stop",
    "path",
    "circle",
    "line",
    "polyline",
    "rect",
    "use",
)

DEFAULT_INLINE_TAGS = (
    "a",
    "abbr",
    "acronym",
    "b",
    "bdo",
    "big",
    "br",
    "button",
    "cite",
    "code",
    "dfn",
    "em",
    "i",
    "img",
    "kbd",
    "label",
    "samp",
    "small",
    "span",
    "strong",
    "sub",
    "sup",
    "tt",
    "var",
)

DEFAULT_FORMATTED_TAGS = ("script", "pre", "textarea")

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
HTML_EXTENSIONS = (".html", ".htm", ".xhtml", ".svg", ".xml")

"""
html-formatter: indent or compact HTML without parsing it into a tree.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    html-formatter index.html
    html-formatter --minify index.html

Library Usage:
    from html_formatter import FormatterConfig, beautify, minify

    pretty = beautify("<ul><li>One</li></ul>")
    compact = minify(pretty, FormatterConfig(attribute_cleanup=False))
"""

__version__ = "0.1.0"

from .config import ConfigError, FormattedTagOptions, FormatterConfig, config_from_mapping
from .exceptions import FormatterError, IndentError
from .formatter import beautify, minify
from .models import IndentLog, LogEntry

__all__ = [
    # Core functionality
    "beautify",
    "minify",
    # Configuration
    "FormatterConfig",
    "FormattedTagOptions",
    "config_from_mapping",
    # Data models
    "IndentLog",
    "LogEntry",
    # Exceptions
    "ConfigError",
    "FormatterError",
    "IndentError",
    # Version
    "__version__",
]

"""Configuration loading and management."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_FORMATTED_TAGS,
    DEFAULT_INLINE_TAGS,
    DEFAULT_LINE_BREAK,
    DEFAULT_SELF_CLOSING_TAGS,
    DEFAULT_TAB,
)

TAG_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9:-]*$")


@dataclass(frozen=True)
class FormattedTagOptions:
    """Per-tag overrides for preformatted elements.

    Each option left as None falls back to the global `formatted_*` setting
    of `FormatterConfig`.

    Attributes:
        trim: Strip whitespace around the element body.
        opening_break: Start the body with a single line break.
        closing_break: End the body with a single line break.
        cleanup_empty: Empty the body when it holds only whitespace.
    """

    trim: bool | None = None
    opening_break: bool | None = None
    closing_break: bool | None = None
    cleanup_empty: bool | None = None


# Preformatted tags with their overrides, as (tag, options) pairs.
FormattedTags = tuple[tuple[str, FormattedTagOptions], ...]


def _default_formatted_tags() -> FormattedTags:
    tags = {tag: FormattedTagOptions() for tag in DEFAULT_FORMATTED_TAGS}
    tags["script"] = FormattedTagOptions(trim=True, closing_break=True)
    return tuple(tags.items())


@dataclass(frozen=True)
class FormatterConfig:
    """Configuration for beautifying and minifying HTML.

    Attributes:
        tab: String repeated once per nesting level.
        line_break: String appended to every emitted line.
        self_closing_tags: Void elements that never open a nesting level.
        inline_tags: Elements kept on one line with the surrounding text.
        formatted_tags: Elements whose body is preserved verbatim, as
            `(tag, options)` pairs. A mapping is accepted and stored as pairs
            so the configuration stays hashable.
        formatted_trim: Default for trimming preformatted bodies.
        formatted_opening_break: Default for starting preformatted bodies with
            a line break (beautify only).
        formatted_closing_break: Default for ending preformatted bodies with a
            line break (beautify only).
        formatted_cleanup_empty: Default for emptying whitespace-only bodies.
        attribute_trim: Strip whitespace around attribute values.
        attribute_cleanup: Collapse whitespace runs inside attribute values.
        cdata_trim: Strip whitespace around CDATA bodies.
        cdata_cleanup: Collapse whitespace runs inside CDATA bodies.

    Examples:
        FormatterConfig(tab="  ", attribute_cleanup=False)
    """

    tab: str = DEFAULT_TAB
    line_break: str = DEFAULT_LINE_BREAK

    # Tag tables
    self_closing_tags: tuple[str, ...] = DEFAULT_SELF_CLOSING_TAGS
    inline_tags: tuple[str, ...] = DEFAULT_INLINE_TAGS
    formatted_tags: FormattedTags = field(default_factory=_default_formatted_tags)

    # Preformatted defaults
    formatted_trim: bool = False
    formatted_opening_break: bool = True
    formatted_closing_break: bool = False
    formatted_cleanup_empty: bool = True

    # Attributes and CDATA
    attribute_trim: bool = True
    attribute_cleanup: bool = True
    cdata_trim: bool = True
    cdata_cleanup: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.formatted_tags, Mapping):
            object.__setattr__(self, "formatted_tags", tuple(self.formatted_tags.items()))
        for name in ("self_closing_tags", "inline_tags"):
            value = getattr(self, name)
            if isinstance(value, list):
                object.__setattr__(self, name, tuple(value))

    def resolve_formatted(self, tag: str) -> FormattedTagOptions:
        """Merge the overrides of a preformatted tag with the global defaults.

        Args:
            tag: Tag name as found in the document; matched case-insensitively.

        Returns:
            FormattedTagOptions: Options with every field set to a boolean.
        """
        overrides = dict(self.formatted_tags).get(tag.lower(), FormattedTagOptions())
        return FormattedTagOptions(
            trim=_pick(overrides.trim, self.formatted_trim),
            opening_break=_pick(overrides.opening_break, self.formatted_opening_break),
            closing_break=_pick(overrides.closing_break, self.formatted_closing_break),
            cleanup_empty=_pick(overrides.cleanup_empty, self.formatted_cleanup_empty),
        )


def _pick(value: bool | None, default: bool) -> bool:
    return default if value is None else value


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`line-break` must not be empty")
    """


# Option names in the nested mapping layout and the fields they feed.
_FORMATTED_OPTIONS = {
    "trim": "trim",
    "opening-break": "opening_break",
    "closing-break": "closing_break",
    "cleanup-empty": "cleanup_empty",
}
_FLAG_SECTIONS = {
    "attributes": {"trim": "attribute_trim", "cleanup": "attribute_cleanup"},
    "cdata": {"trim": "cdata_trim", "cleanup": "cdata_cleanup"},
}
_TOP_LEVEL_KEYS = {"tab", "line-break", "self-closing", "inline", "formatted", *_FLAG_SECTIONS}


def config_from_mapping(raw_config: Mapping[str, object] | None) -> FormatterConfig:
    """Build a configuration from the nested key layout.

    Missing keys keep their defaults. Tag lists replace the default tables
    rather than extending them.

    Args:
        raw_config: Nested mapping, for example the contents of a TOML table::

            {
                "tab": "  ",
                "line-break": "\\n",
                "self-closing": {"tag": ["br", "img"]},
                "inline": {"tag": ["a", "span"]},
                "formatted": {
                    "tag": {"script": {"trim": True}, "pre": {}},
                    "opening-break": True,
                },
                "attributes": {"trim": True, "cleanup": True},
                "cdata": {"trim": False},
            }

    Returns:
        FormatterConfig: Configuration with the provided values applied.

    Raises:
        ConfigError: If the mapping contains unsupported keys or values of the
            wrong type.

    Examples:
        config_from_mapping({"tab": "\\t", "inline": {"tag": []}})
    """
    if not raw_config:
        return FormatterConfig()
    if not isinstance(raw_config, Mapping):
        raise ConfigError("configuration must be a mapping")

    unknown = sorted(set(raw_config) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unsupported configuration keys: {', '.join(unknown)}")

    changes: dict[str, object] = {}

    if "tab" in raw_config:
        changes["tab"] = _ensure_string("tab", raw_config["tab"])
    if "line-break" in raw_config:
        changes["line_break"] = _ensure_string("line-break", raw_config["line-break"])

    for key, field_name in (("self-closing", "self_closing_tags"), ("inline", "inline_tags")):
        if key in raw_config:
            section = _ensure_section(key, raw_config[key], {"tag"})
            if "tag" in section:
                changes[field_name] = _ensure_tag_list(f"{key}.tag", section["tag"])

    if "formatted" in raw_config:
        allowed = {"tag", *_FORMATTED_OPTIONS}
        section = _ensure_section("formatted", raw_config["formatted"], allowed)
        if "tag" in section:
            changes["formatted_tags"] = _parse_formatted_tags(section["tag"])
        for key, option in _FORMATTED_OPTIONS.items():
            if key in section:
                changes[f"formatted_{option}"] = _ensure_bool(f"formatted.{key}", section[key])

    for key, options in _FLAG_SECTIONS.items():
        if key in raw_config:
            section = _ensure_section(key, raw_config[key], set(options))
            for option, field_name in options.items():
                if option in section:
                    changes[field_name] = _ensure_bool(f"{key}.{option}", section[option])

    return replace(FormatterConfig(), **changes)


def _parse_formatted_tags(raw_tags: object) -> FormattedTags:
    if isinstance(raw_tags, (list, tuple)):
        return tuple(
            (tag, FormattedTagOptions()) for tag in _ensure_tag_list("formatted.tag", raw_tags)
        )
    if not isinstance(raw_tags, Mapping):
        raise ConfigError("`formatted.tag` must be a table or a list of tag names")

    tags: dict[str, FormattedTagOptions] = {}
    for tag, raw_options in raw_tags.items():
        name = _ensure_tag_name("formatted.tag", tag)
        section = _ensure_section(
            f"formatted.tag.{name}", raw_options or {}, set(_FORMATTED_OPTIONS)
        )
        options = {
            option: _ensure_bool(f"formatted.tag.{name}.{key}", section[key])
            for key, option in _FORMATTED_OPTIONS.items()
            if key in section
        }
        tags[name] = FormattedTagOptions(**options)
    return tuple(tags.items())


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.html-formatter]`` table from `pyproject.toml` and the
    ``[html-formatter]`` or ``[tool.html-formatter]`` table from
    `.html-formatter.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("templates"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "html-formatter")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".html-formatter.toml",
            table_paths=[("html-formatter",), ("tool", "html-formatter")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatterConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatterConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatterConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FormatterConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        return config_from_mapping(raw_config)
    except ConfigError as error:
        error_message = f"Invalid `[{table_display}]` settings in {config_file}: {error}"
        raise ConfigError(error_message) from error


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    """Lowercase and deduplicate tag names, keeping their first position.

    A later entry for the same preformatted tag replaces the earlier options.
    """
    formatted_tags = {tag.lower(): options for tag, options in config.formatted_tags}
    return replace(
        config,
        self_closing_tags=tuple(dict.fromkeys(tag.lower() for tag in config.self_closing_tags)),
        inline_tags=tuple(dict.fromkeys(tag.lower() for tag in config.inline_tags)),
        formatted_tags=tuple(formatted_tags.items()),
    )


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the tab or line break are not strings, the line break
            is empty, a tag name is malformed, or a flag is not a boolean.

    Examples:
        validate_config(FormatterConfig(tab="\\t"))
    """
    _ensure_string("tab", config.tab)
    if not _ensure_string("line_break", config.line_break):
        raise ConfigError("`line_break` must not be empty")

    _ensure_tag_list("self_closing_tags", config.self_closing_tags)
    _ensure_tag_list("inline_tags", config.inline_tags)

    if not isinstance(config.formatted_tags, tuple) or not all(
        isinstance(entry, tuple) and len(entry) == 2 for entry in config.formatted_tags
    ):
        raise ConfigError("`formatted_tags` must map tag names to options")
    for tag, options in config.formatted_tags:
        _ensure_tag_name("formatted_tags", tag)
        if not isinstance(options, FormattedTagOptions):
            raise ConfigError(f"`formatted_tags.{tag}` must be FormattedTagOptions")
        for option in fields(options):
            value = getattr(options, option.name)
            if value is not None:
                _ensure_bool(f"formatted_tags.{tag}.{option.name}", value)

    for option in fields(config):
        if option.name == "formatted_tags":
            continue
        if option.name.startswith(("formatted_", "attribute_", "cdata_")):
            _ensure_bool(option.name, getattr(config, option.name))


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatterConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.

    Examples:
        updated = apply_overrides(config, tab="  ", line_break=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), tab="\\t")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return normalize_config(config)


def _ensure_string(key: str, value: object) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"`{key}` must be a string")
    return value


def _ensure_bool(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"`{key}` must be a boolean")
    return value


def _ensure_tag_name(key: str, value: object) -> str:
    if not isinstance(value, str) or not TAG_NAME_PATTERN.match(value):
        raise ConfigError(f"`{key}` contains an invalid tag name: {value!r}")
    return value


def _ensure_tag_list(key: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"`{key}` must be a list of tag names")
    return tuple(_ensure_tag_name(key, tag) for tag in value)


def _ensure_section(key: str, value: object, allowed: set[str]) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"`{key}` must be a table")
    unknown = sorted(set(value) - allowed)
    if unknown:
        raise ConfigError(f"Unsupported keys in `{key}`: {', '.join(unknown)}")
    return value

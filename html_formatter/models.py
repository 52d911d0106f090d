"""Data models for html-formatter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto


class Action(Enum):
    """Indentation decisions taken by the indentation engine.

    Attributes:
        KEEP_INDENT: Emit the match at the current depth.
        DECREASE_INDENT: Step one level out, then emit the match.
        INCREASE_INDENT: Emit the match, then step one level in.
        DISCARD: Drop the match without emitting a line.
    """

    KEEP_INDENT = auto()
    DECREASE_INDENT = auto()
    INCREASE_INDENT = auto()
    DISCARD = auto()


@dataclass(frozen=True)
class Rule:
    """One entry of the indentation grammar.

    Attributes:
        name: Human-readable name used in logs.
        pattern: Compiled pattern matched against the start of the remaining text.
        action: Indentation decision applied when the pattern matches.
    """

    name: str
    pattern: re.Pattern[str]
    action: Action


@dataclass
class Content:
    """Document buffer plus the table of parts extracted from it.

    Attributes:
        text: HTML content at its current pipeline stage.
        parts: Extracted substrings keyed by category, in insertion order.
    """

    text: str = ""
    parts: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class LogEntry:
    """Single indentation step.

    Attributes:
        rule: Name of the rule that matched.
        subject: Remaining text before the match was consumed.
        match: Literal text consumed by the rule.
    """

    rule: str
    subject: str
    match: str


@dataclass
class IndentLog:
    """Ordered collection of indentation steps."""

    entries: list[LogEntry] = field(default_factory=list)

    def push(self, rule: str, subject: str, match: str) -> None:
        self.entries.append(LogEntry(rule=rule, subject=subject, match=match))

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

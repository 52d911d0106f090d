"""Package-specific exception types."""

from __future__ import annotations


class FormatterError(ValueError):
    """Base class for formatting-related errors.

    Represents errors encountered while reformatting HTML content.
    """


class IndentError(FormatterError):
    """Raised when the indentation engine cannot classify the remaining text.

    No rule of the pattern library matched the start of the unconsumed
    content, which means the input is outside the supported grammar.

    Args:
        message: Short description of the failure.
        leftover: Text that was left unconsumed, if any.
    """

    def __init__(
        self, message: str = "Unable to create the indented content.", leftover: str | None = None
    ):
        self.leftover = leftover
        super().__init__(self._build_message(message))

    def _build_message(self, message: str) -> str:
        if not self.leftover:
            return message
        return f"{message} Extra content left at the end: {self.leftover}"

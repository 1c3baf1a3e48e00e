"""Exception hierarchy for lesson loading and parsing."""

from __future__ import annotations


class LessonError(Exception):
    """Base class for every error raised by lessondex."""


class ReadError(LessonError):
    """A lesson path could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(LessonError):
    """Lesson input could not be parsed as text."""


class EncodingError(ParseError):
    """Lesson content is not valid UTF-8 text."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path

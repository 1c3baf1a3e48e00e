"""Extract bolded Q<N>./A<N>. knowledge-check pairs from lesson text."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from .models import LessonDocument, QAPair
from .parser import ensure_text, scan_lines

logger = logging.getLogger(__name__)

# Accepts "**Q1.** text", "**Q1:** text", "- **Q1.** text", "> **Q1.** text"
# and bold closed later on the line: "**Q1. text**", "**Q1. What is** JSX?".
_MARKER_RE = re.compile(
    r"^[ \t]*(?:>[ \t]*)*(?:[-*+][ \t]+)?"
    r"\*\*[ \t]*(?P<kind>[QA])[ \t]*(?P<number>\d+)[ \t]*[.:][ \t]*(?P<closed>\*\*)?"
    r"[ \t]*(?P<rest>.*)$"
)


def _marker(line: str) -> tuple[str, int, str] | None:
    match = _MARKER_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    rest = match.group("rest").rstrip()
    if match.group("closed") is None:
        end = rest.find("**")
        if end < 0:
            logger.debug("Unclosed bold marker %s%s: %r", match.group("kind"), match.group("number"), line)
            return None
        rest = " ".join(part for part in (rest[:end].rstrip(), rest[end + 2 :].strip()) if part)
    return match.group("kind"), int(match.group("number")), rest


class _PendingPair:
    def __init__(self, number: int, first_line: str) -> None:
        self.number = number
        self.question: list[str] = [first_line + "\n"]
        self.answer: list[str] | None = None

    def add(self, line: str) -> None:
        if self.answer is None:
            self.question.append(line)
        else:
            self.answer.append(line)

    def finish(self) -> QAPair | None:
        if self.answer is None:
            logger.debug("Skipping question Q%d without an answer", self.number)
            return None
        return QAPair(
            number=self.number,
            question="".join(self.question).strip(),
            answer="".join(self.answer).strip(),
        )


def iter_qa_pairs(text: str) -> Iterator[QAPair]:
    """Yield question/answer pairs in document order.

    An answer runs until the next question marker or the end of the text.
    Markers inside fenced code blocks are plain text.
    """
    pending: _PendingPair | None = None
    for line, in_code in scan_lines(text):
        found = None if in_code else _marker(line)
        if found is None:
            if pending is not None:
                pending.add(line)
            continue

        kind, number, rest = found
        if kind == "Q":
            if pending is not None:
                pair = pending.finish()
                if pair is not None:
                    yield pair
            pending = _PendingPair(number, rest)
        elif pending is None:
            logger.debug("Ignoring answer A%d with no open question", number)
        elif pending.answer is None:
            if number != pending.number:
                logger.debug("Answer A%d follows question Q%d", number, pending.number)
            pending.answer = [rest + "\n"]
        else:
            pending.add(line)

    if pending is not None:
        pair = pending.finish()
        if pair is not None:
            yield pair


class KnowledgeCheck:
    """Lazy, restartable view over the pairs of one lesson.

    Nothing is scanned until iteration, and every iteration rescans.
    """

    def __init__(self, text: str, source: str = "") -> None:
        ensure_text(text)
        self._text = text
        self.source = source

    def __iter__(self) -> Iterator[QAPair]:
        return iter_qa_pairs(self._text)

    def count(self) -> int:
        """Number of pairs; scans the text."""
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None

    def __repr__(self) -> str:
        return f"KnowledgeCheck(source={self.source!r})"


def _document_text(document: LessonDocument) -> str:
    if document.text:
        return document.text
    parts: list[str] = []
    for section in document.sections:
        if section.level > 0:
            parts.append(f"{'#' * section.level} {section.heading}\n")
        parts.append(section.body)
    return "".join(parts)


def extract_qa_pairs(source: LessonDocument | str) -> KnowledgeCheck:
    """Return the knowledge-check pairs of a lesson document or raw text."""
    if isinstance(source, LessonDocument):
        return KnowledgeCheck(_document_text(source), source=source.path)
    return KnowledgeCheck(source)

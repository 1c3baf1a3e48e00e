"""Core domain models for parsed lesson documents."""

from __future__ import annotations

from dataclasses import dataclass, field

KNOWLEDGE_CHECK_HEADING = "Knowledge Check"


@dataclass(frozen=True)
class Section:
    """One heading-delimited block of a lesson.

    Level 0 marks text that precedes the first heading, or a document
    without headings; its heading is empty.
    """

    level: int
    heading: str
    body: str

    @property
    def content(self) -> str:
        """Body text without surrounding blank lines."""
        return self.body.strip()


@dataclass(frozen=True)
class QAPair:
    """One knowledge-check question with its answer."""

    number: int
    question: str
    answer: str


@dataclass(frozen=True)
class LessonDocument:
    """Parsed Markdown lesson file."""

    path: str
    title: str
    sections: tuple[Section, ...]
    text: str = field(default="", repr=False)

    def body_text(self) -> str:
        """Concatenate section bodies, dropping heading lines."""
        return "".join(section.body for section in self.sections)

    def find_section(self, heading: str) -> Section | None:
        """Return the first section whose heading matches, ignoring case."""
        wanted = heading.strip().casefold()
        for section in self.sections:
            if section.heading.casefold() == wanted:
                return section
        return None

    @property
    def knowledge_check(self) -> Section | None:
        return self.find_section(KNOWLEDGE_CHECK_HEADING)


@dataclass(frozen=True)
class TocEntry:
    """Table-of-contents row for one lesson."""

    path: str
    title: str
    sections: tuple[tuple[int, str], ...]


@dataclass(frozen=True)
class StudyItem:
    """Question/answer pair tagged with the lesson it came from."""

    path: str
    title: str
    pair: QAPair

    @property
    def question(self) -> str:
        return self.pair.question

    @property
    def answer(self) -> str:
        return self.pair.answer

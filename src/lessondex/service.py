"""Application service for browsing, exporting, and drilling a lesson corpus."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from . import __version__
from .indexer import DEFAULT_PATTERN, CorpusIndex, build_index, discover_lessons
from .models import StudyItem, TocEntry

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = 1


@dataclass(frozen=True)
class ExportSummary:
    """Summary emitted by study set export."""

    path: str
    lesson_count: int
    question_count: int


@dataclass(frozen=True)
class QuizScore:
    """Tally for one quiz round."""

    attempted: int
    correct: int

    @property
    def percent(self) -> float:
        return 0.0 if self.attempted == 0 else 100.0 * self.correct / self.attempted


class StudyService:
    """Coordinates corpus loading and study flows."""

    def __init__(self, root: Path | str, pattern: str = DEFAULT_PATTERN) -> None:
        """Discover and index every lesson under ``root``."""
        self.root = Path(root)
        self.index: CorpusIndex = build_index(discover_lessons(self.root, pattern))
        self._attempted = 0
        self._correct = 0

    def table_of_contents(self) -> list[TocEntry]:
        return self.index.table_of_contents()

    def study_set(self) -> list[StudyItem]:
        return self.index.study_set()

    def search(self, term: str) -> list[StudyItem]:
        return self.index.search(term)

    def quiz_cards(self, limit: int | None = None, shuffle: bool = False, seed: int | None = None) -> list[StudyItem]:
        """Select cards for one quiz round, in lesson order unless shuffled."""
        cards = self.index.study_set()
        if shuffle:
            random.Random(seed).shuffle(cards)
        if limit is not None:
            if limit < 0:
                raise ValueError(f"Quiz limit must be non-negative, got {limit}.")
            cards = cards[:limit]
        self._attempted = 0
        self._correct = 0
        return cards

    def record_result(self, item: StudyItem, correct: bool) -> None:
        """Record one self-graded answer for the current round."""
        self._attempted += 1
        if correct:
            self._correct += 1
        logger.debug("Q%d of %s marked %s", item.pair.number, item.path, "correct" if correct else "incorrect")

    def score(self) -> QuizScore:
        return QuizScore(attempted=self._attempted, correct=self._correct)

    def export_study_set(self, export_path: Path | str) -> ExportSummary:
        """Export every lesson and its questions to a JSON file."""
        by_path: dict[str, list[dict[str, object]]] = {path: [] for path in self.index.documents}
        for item in self.index.study_set():
            by_path[item.path].append({"number": item.pair.number, "question": item.question, "answer": item.answer})
        lessons = [
            {"path": document.path, "title": document.title, "questions": by_path[document.path]}
            for document in self.index
        ]
        question_count = sum(len(questions) for questions in by_path.values())

        payload = {
            "format_version": EXPORT_FORMAT_VERSION,
            "exported_at": datetime.now(UTC).isoformat(),
            "source": {
                "app_version": __version__,
                "root": str(self.root),
            },
            "lessons": lessons,
        }

        path = Path(export_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Exported %d lessons to %s", len(lessons), path)
        return ExportSummary(path=str(path), lesson_count=len(lessons), question_count=question_count)

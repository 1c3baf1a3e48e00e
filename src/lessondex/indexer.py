"""Aggregate lesson documents into a navigable, searchable corpus index."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from .errors import ReadError
from .knowledge_check import extract_qa_pairs
from .models import LessonDocument, QAPair, StudyItem, TocEntry
from .parser import load_document

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "*.md"

Loader = Callable[[Path | str], LessonDocument]


@dataclass(frozen=True, eq=False)
class CorpusIndex:
    """Loaded lessons keyed by path, with their pairs flattened in load order.

    ``documents`` is a read-only view matching ``qa_pairs``.
    """

    documents: Mapping[str, LessonDocument]
    qa_pairs: tuple[QAPair, ...]
    _items: tuple[StudyItem, ...]

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, path: object) -> bool:
        return str(path) in self.documents

    def __getitem__(self, path: Path | str) -> LessonDocument:
        return self.documents[str(path)]

    def __iter__(self) -> Iterator[LessonDocument]:
        return iter(self.documents.values())

    def study_set(self) -> list[StudyItem]:
        """Return every pair tagged with its source lesson."""
        return list(self._items)

    def table_of_contents(self) -> list[TocEntry]:
        """Return one entry per lesson listing its headed sections."""
        return [
            TocEntry(
                path=document.path,
                title=document.title,
                sections=tuple((section.level, section.heading) for section in document.sections if section.level > 0),
            )
            for document in self.documents.values()
        ]

    def search(self, term: str) -> list[StudyItem]:
        """Find pairs whose question or answer contains ``term``, ignoring case."""
        needle = term.strip().casefold()
        if not needle:
            return []
        return [
            item
            for item in self._items
            if needle in item.question.casefold() or needle in item.answer.casefold()
        ]


def build_index(paths: Iterable[Path | str], loader: Loader = load_document) -> CorpusIndex:
    """Load lessons in the given order and flatten their knowledge checks.

    The caller owns ordering; pass a sorted list for reproducible output.
    """
    documents: dict[str, LessonDocument] = {}
    items: list[StudyItem] = []
    for path in paths:
        key = str(path)
        if key in documents:
            raise ValueError(f"Duplicate lesson path: {key}")
        document = loader(path)
        documents[key] = document
        pairs = list(extract_qa_pairs(document))
        logger.debug("Indexed %s with %d questions", key, len(pairs))
        items.extend(StudyItem(path=key, title=document.title, pair=pair) for pair in pairs)

    return CorpusIndex(
        documents=MappingProxyType(documents),
        qa_pairs=tuple(item.pair for item in items),
        _items=tuple(items),
    )


def discover_lessons(root: Path | str, pattern: str = DEFAULT_PATTERN) -> list[Path]:
    """Return lesson files under ``root`` in sorted order."""
    base = Path(root)
    if not base.is_dir():
        raise ReadError(str(root), "not a directory")
    paths = sorted(path for path in base.rglob(pattern) if path.is_file())
    logger.debug("Discovered %d lessons under %s", len(paths), base)
    return paths

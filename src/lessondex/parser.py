"""Split Markdown lesson text into heading-delimited sections."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from .errors import EncodingError, ReadError
from .models import LessonDocument, Section

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
# C0 controls other than tab, newline, form feed and carriage return, plus DEL.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0e-\x1f\x7f]")


def split_lines(text: str) -> list[str]:
    """Split on newlines only, keeping line endings so joins are lossless."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def scan_lines(text: str) -> Iterator[tuple[str, bool]]:
    """Yield each line with a flag telling whether it belongs to a code fence.

    Fence delimiter lines count as code. An unclosed fence runs to the end.
    """
    fence: str | None = None
    for line in split_lines(text):
        stripped = line.rstrip("\r\n")
        match = _FENCE_RE.match(stripped)
        if fence is None:
            if match:
                fence = match.group(1)
                yield line, True
            else:
                yield line, False
            continue
        if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            if not stripped[match.end() :].strip():
                fence = None
        yield line, True


def _match_heading(line: str) -> tuple[int, str] | None:
    match = _HEADING_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    heading = _CLOSING_HASHES_RE.sub("", match.group(2) or "").strip()
    return len(match.group(1)), heading


def _binary_reason(text: str) -> str | None:
    if "\x00" in text:
        return "content contains NUL bytes and is not text"
    match = _CONTROL_RE.search(text)
    if match is not None:
        return f"content contains control character U+{ord(match.group()):04X} at offset {match.start()}"
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        return f"content contains an unpaired surrogate at offset {exc.start}"
    return None


def ensure_text(text: str, path: str | None = None) -> None:
    """Reject input that carries binary content."""
    reason = _binary_reason(text)
    if reason is not None:
        raise EncodingError(reason, path)


def parse_sections(text: str) -> list[Section]:
    """Parse lesson text into ordered sections.

    Text before the first heading becomes a level-0 section with an empty
    heading. Headings inside fenced code blocks are ignored.
    """
    ensure_text(text)
    sections: list[Section] = []
    level = 0
    heading = ""
    body: list[str] = []
    seen_heading = False

    for line, in_code in scan_lines(text):
        matched = None if in_code else _match_heading(line)
        if matched is None:
            body.append(line)
            continue
        if seen_heading or body:
            sections.append(Section(level=level, heading=heading, body="".join(body)))
        level, heading = matched
        body = []
        seen_heading = True

    if seen_heading or body:
        sections.append(Section(level=level, heading=heading, body="".join(body)))
    return sections


def _title_for(path: str, sections: list[Section]) -> str:
    for section in sections:
        if section.level == 1 and section.heading:
            return section.heading
    for section in sections:
        if section.level > 0 and section.heading:
            return section.heading
    return Path(path).stem


def parse_document(path: Path | str, text: str) -> LessonDocument:
    """Build a lesson document from already-decoded text."""
    sections = parse_sections(text)
    path_text = str(path)
    return LessonDocument(path=path_text, title=_title_for(path_text, sections), sections=tuple(sections), text=text)


def decode_text(data: bytes, path: str | None = None) -> str:
    """Decode raw lesson bytes as UTF-8, tolerating a BOM and CRLF endings."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"not valid UTF-8 ({exc.reason} at byte {exc.start})", path) from exc
    ensure_text(text, path)
    return text.replace("\r\n", "\n")


def load_document(path: Path | str) -> LessonDocument:
    """Read and parse one lesson file."""
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise ReadError(str(path), exc.strerror or str(exc)) from exc
    document = parse_document(path, decode_text(data, str(path)))
    logger.debug("Loaded %s: %d sections, title %r", path, len(document.sections), document.title)
    return document

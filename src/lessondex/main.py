"""CLI entrypoint for browsing and drilling Markdown lesson notes."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from . import __version__
from .errors import LessonError
from .indexer import DEFAULT_PATTERN
from .models import StudyItem
from .service import StudyService

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
SHOW_COMMANDS = {":show", ":s"}
FLOW_EXIT_COMMANDS = {":quit", ":exit", ":q", ":back", ":b"}
YES_ANSWERS = {"y", "yes"}


def _service(root: str, pattern: str) -> StudyService:
    """Create app service for one lesson directory."""
    return StudyService(Path(root), pattern=pattern)


def _non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lessondex", description="Index and drill Markdown lesson notes")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--pattern", default=DEFAULT_PATTERN, help="glob for lesson files (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    toc = commands.add_parser("toc", help="print the table of contents")
    toc.add_argument("root")

    questions = commands.add_parser("questions", help="list knowledge-check questions")
    questions.add_argument("root")
    questions.add_argument("--answers", action="store_true", help="include answers")

    search = commands.add_parser("search", help="search questions and answers")
    search.add_argument("root")
    search.add_argument("term")

    export = commands.add_parser("export", help="export the study set as JSON")
    export.add_argument("root")
    export.add_argument("output")

    quiz = commands.add_parser("quiz", help="run a self-graded quiz")
    quiz.add_argument("root")
    quiz.add_argument("--limit", type=_non_negative_int, default=None)
    quiz.add_argument("--shuffle", action="store_true")
    quiz.add_argument("--seed", type=int, default=None)
    return parser


def run(argv: list[str] | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the CLI application."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    try:
        service = _service(args.root, args.pattern)
        if args.command == "toc":
            return _toc_flow(service, print_fn)
        if args.command == "questions":
            return _questions_flow(service, print_fn, show_answers=args.answers)
        if args.command == "search":
            return _search_flow(service, args.term, print_fn)
        if args.command == "export":
            return _export_flow(service, args.output, print_fn)
        return quiz_shell(service, input_fn, print_fn, limit=args.limit, shuffle=args.shuffle, seed=args.seed)
    except LessonError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _toc_flow(service: StudyService, print_fn: PrintFn) -> int:
    """Print every lesson title followed by its indented headings."""
    entries = service.table_of_contents()
    if not entries:
        print_fn("No lessons found.")
        return 0
    for entry in entries:
        print_fn(f"{entry.title} ({entry.path})")
        for level, heading in entry.sections:
            if level == 1 and heading == entry.title:
                continue
            print_fn(f"{'  ' * level}{heading}")
    return 0


def _questions_flow(service: StudyService, print_fn: PrintFn, *, show_answers: bool) -> int:
    """Print knowledge-check questions grouped by lesson."""
    items = service.study_set()
    if not items:
        print_fn("No knowledge-check questions found.")
        return 0
    current_path: str | None = None
    for item in items:
        if item.path != current_path:
            current_path = item.path
            print_fn(f"\n=== {item.title} ===")
        print_fn(f"Q{item.pair.number}. {item.question}")
        if show_answers:
            print_fn(f"A{item.pair.number}. {item.answer}")
    return 0


def _search_flow(service: StudyService, term: str, print_fn: PrintFn) -> int:
    """Print questions matching a search term."""
    matches = service.search(term)
    if not matches:
        print_fn(f"No matches for '{term}'.")
        return 0
    print_fn(f"{len(matches)} match(es) for '{term}':")
    for item in matches:
        print_fn(f"- [{item.title}] Q{item.pair.number}. {item.question}")
    return 0


def _export_flow(service: StudyService, output: str, print_fn: PrintFn) -> int:
    """Export the study set to a JSON file."""
    try:
        summary = service.export_study_set(output)
    except OSError as exc:
        print_fn(f"Export failed: {exc}")
        return 1
    print_fn(f"Exported study set to {summary.path}")
    print_fn(f"- lessons: {summary.lesson_count}")
    print_fn(f"- questions: {summary.question_count}")
    return 0


def quiz_shell(
    service: StudyService,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    *,
    limit: int | None = None,
    shuffle: bool = False,
    seed: int | None = None,
) -> int:
    """Run a self-graded quiz over the study set."""
    cards = service.quiz_cards(limit=limit, shuffle=shuffle, seed=seed)
    if not cards:
        if limit == 0:
            print_fn("Quiz limit is 0; no questions selected.")
        else:
            print_fn("No knowledge-check questions found.")
        return 0

    print_fn("\n=== Quiz ===")
    print_fn(f"Questions this round: {len(cards)}")
    print_fn("Type :show to reveal the answer, :q to stop.")
    for item in cards:
        if not _run_card(service, item, input_fn, print_fn):
            score = service.score()
            print_fn(f"\nRound ended early: {score.correct}/{score.attempted} correct")
            return 0

    score = service.score()
    print_fn(f"\nRound complete: {score.correct}/{score.attempted} correct ({score.percent:.0f}%)")
    return 0


def _run_card(service: StudyService, item: StudyItem, input_fn: InputFn, print_fn: PrintFn) -> bool:
    """Ask one question and record the self-grade; False means leave the round."""
    print_fn(f"\n[{item.title}] Q{item.pair.number}. {item.question}")
    while True:
        reply = input_fn("Your answer (or :show): ").strip()
        lowered = reply.lower()
        if lowered in FLOW_EXIT_COMMANDS:
            return False
        if lowered in SHOW_COMMANDS or reply:
            break
        print_fn("Type an answer, :show, or :q.")

    print_fn(f"Answer: {item.answer}")
    while True:
        grade = input_fn("Did you get it right? [y/n]: ").strip().lower()
        if grade in FLOW_EXIT_COMMANDS:
            return False
        if grade in YES_ANSWERS or grade in {"n", "no"}:
            service.record_result(item, grade in YES_ANSWERS)
            return True
        print_fn("Invalid choice.")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()

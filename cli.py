"""
Offline maintenance commands for the question bank.

    question-bank import [--base-dir DIR]   load the mapped markdown files
    question-bank verify                    counts by category / difficulty, number range
    question-bank gaps                      missing question numbers in the observed range
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db import SessionLocal, init_db
from importer import import_all_markdown_files
from models import Category, Question

logger = logging.getLogger("question-bank.cli")


def collect_stats(db: Session) -> dict:
    by_category = db.execute(
        select(Category.name, func.count(Question.id))
        .outerjoin(Question, Question.category_id == Category.id)
        .group_by(Category.id, Category.name)
        .order_by(Category.display_order, Category.id)
    ).all()
    by_difficulty = db.execute(
        select(Question.difficulty, func.count(Question.id)).group_by(Question.difficulty)
    ).all()
    lo, hi = db.execute(
        select(func.min(Question.question_number), func.max(Question.question_number))
    ).one()
    return {
        "total": db.scalar(select(func.count(Question.id))) or 0,
        "by_category": [(name, n) for name, n in by_category],
        "by_difficulty": sorted((d.value, n) for d, n in by_difficulty),
        "min_number": lo or 0,
        "max_number": hi or 0,
    }


def find_missing(numbers: Sequence[int]) -> List[int]:
    """Numbers absent from min(numbers)..max(numbers)."""
    if not numbers:
        return []
    present = set(numbers)
    return [n for n in range(min(present), max(present) + 1) if n not in present]


def collapse_ranges(missing: Sequence[int]) -> List[str]:
    """[5, 7, 8, 9] -> ["Q5", "Q7-Q9"]"""
    out: List[str] = []
    if not missing:
        return out
    start = end = missing[0]
    for n in missing[1:]:
        if n == end + 1:
            end = n
            continue
        out.append(f"Q{start}" if start == end else f"Q{start}-Q{end}")
        start = end = n
    out.append(f"Q{start}" if start == end else f"Q{start}-Q{end}")
    return out


def cmd_import(args: argparse.Namespace) -> int:
    base_dir = args.base_dir
    logger.info("Starting question import from markdown files...")
    logger.info("Base directory: %s", base_dir)
    with SessionLocal() as db:
        result = import_all_markdown_files(db, base_dir)

    logger.info("=== Import Complete ===")
    logger.info("Imported: %d", result.imported_count)
    logger.info("Skipped: %d", result.skipped_count)
    logger.info("Errors: %d", result.error_count)
    logger.info("Success: %s", result.success)
    if result.error_message:
        logger.error("Error: %s", result.error_message)
    return 0 if result.success else 1


def cmd_verify(_args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        stats = collect_stats(db)

    logger.info("=== Question Import Verification ===")
    logger.info("Total Questions: %d", stats["total"])
    logger.info("Questions by Category:")
    for name, n in stats["by_category"]:
        logger.info("  %s: %d questions", name, n)
    logger.info("Questions by Difficulty:")
    for level, n in stats["by_difficulty"]:
        logger.info("  %s: %d questions", level, n)
    logger.info("Question Number Range: Q%d - Q%d", stats["min_number"], stats["max_number"])
    return 0


def cmd_gaps(_args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        numbers = list(
            db.scalars(select(Question.question_number).order_by(Question.question_number)).all()
        )

    logger.info("=== Question Numbers Analysis ===")
    logger.info("Total Questions in Database: %d", len(numbers))
    if not numbers:
        return 0

    lo, hi = numbers[0], numbers[-1]
    missing = find_missing(numbers)
    logger.info("Range: Q%d - Q%d", lo, hi)
    logger.info("Expected Total (if no gaps): %d", hi - lo + 1)
    logger.info("Actual Total: %d", len(numbers))
    logger.info("Missing Questions: %d", len(missing))

    if not missing:
        logger.info("No gaps found - all questions from Q%d to Q%d are present", lo, hi)
        return 0

    logger.info("Missing Question Numbers:")
    for label in collapse_ranges(missing):
        logger.info("  %s", label)
    logger.info("Total Missing: %d questions", len(missing))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="question-bank", description=__doc__.splitlines()[1])
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="import the mapped markdown files")
    p_import.add_argument(
        "--base-dir",
        default=os.getenv("QUESTION_BANK_DIR", ".."),
        help="directory holding the markdown files (default: $QUESTION_BANK_DIR or ..)",
    )
    p_import.set_defaults(func=cmd_import)

    sub.add_parser("verify", help="print counts by category and difficulty").set_defaults(
        func=cmd_verify
    )
    sub.add_parser("gaps", help="list missing question numbers").set_defaults(func=cmd_gaps)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = build_parser().parse_args(argv)
    init_db()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

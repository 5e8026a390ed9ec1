# Markdown question importer.
#
# Parsing is pure (text -> ParsedQuestion records); persistence only sees the
# records, so the regexes can be exercised against literal markdown.
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Difficulty, Question

logger = logging.getLogger("question-bank.importer")

TITLE_MAX_LEN = 500

# A question body runs until the next "## Q<n>:" / "### **Q<a>-Q<b>:**" heading or EOF
_NEXT_HEADING = r"(?=\n#{2,3}\s+\*{0,2}Q\d+(?:-Q\d+)?:|\Z)"

# ## Q12:, ## **Q12:**, ### Q12:  (but not the start of a Q12-Q14 range)
SINGLE_RE = re.compile(r"#{2,3}\s+\*{0,2}Q(\d+)(?!-Q\d+):\*{0,2}\s+(.+?)" + _NEXT_HEADING, re.DOTALL)

# ## Q77-Q80:, ## **Q77-Q80:**
RANGE_RE = re.compile(r"#{2,3}\s+\*{0,2}Q(\d+)-Q(\d+):\*{0,2}\s+(.+?)" + _NEXT_HEADING, re.DOTALL)

ADVANCED_KEYWORDS = (
    "advanced",
    "optimization",
    "performance",
    "architecture",
    "complex",
    "distributed",
    "microservices",
    "saga pattern",
    "event sourcing",
    "cqrs",
)
BEGINNER_KEYWORDS = (
    "basic",
    "fundamental",
    "introduction",
    "simple",
    "what is",
    "define",
)

# filename -> category id, relative to the import base directory
FILE_MAPPING: Dict[str, int] = {
    # Q1-Q53 catch-all; lands in C# Fundamentals
    "Comprehensive_Interview_Answers.md": 1,
    "Q21_Q25_C#.md": 1,
    "Q26_Q30_C#.md": 1,
    "Q31_Q34_C#.md": 1,
    "Q35_Q43_async_C#.md": 1,
    "Q44_Q50_C#.md": 1,
    "Q51_Q60_mvc_batch.md": 2,
    "Q61_Q70_mvc_batch.md": 2,
    "Q71_Q80_mvc_batch.md": 2,
    "Q81_Q90_mvc_batch.md": 2,
    "Q91_Q99_DotNet_Advanced.md": 3,
    "Q100_Q115_Azure_Cloud.md": 4,
    "Q108-Q115_Azure.md": 4,
    "Q111_Q120_continuation.md": 4,
    "Q113_Q120_final.md": 4,
    "Q121_Q140_DevOps_Microservices.md": 5,
    "Q125_Q140_complete.md": 5,
    "Q141_Q171_Microservices_Advanced.md": 6,
    "Q172_Q200_SQL_Database.md": 7,
}


class ParsedQuestion(BaseModel):
    question_number: int
    title: str
    content: str
    difficulty: Difficulty


class ParsedFile(BaseModel):
    questions: List[ParsedQuestion] = []
    error_count: int = 0


class ImportResult(BaseModel):
    success: bool = False
    imported_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    error_message: Optional[str] = None

    def __str__(self) -> str:
        return (
            f"Success: {self.success}, Imported: {self.imported_count}, "
            f"Skipped: {self.skipped_count}, Errors: {self.error_count}"
        )


# --- Pure helpers -----------------------------------------------------------------


def determine_difficulty(content: str) -> Difficulty:
    """Keyword heuristic; advanced keywords win over beginner ones."""
    lowered = content.lower()
    if any(k in lowered for k in ADVANCED_KEYWORDS):
        return Difficulty.ADVANCED
    if any(k in lowered for k in BEGINNER_KEYWORDS):
        return Difficulty.BEGINNER
    return Difficulty.INTERMEDIATE


def truncate_title(title: str) -> str:
    if len(title) > TITLE_MAX_LEN:
        return title[: TITLE_MAX_LEN - 3] + "..."
    return title


def first_line(content: str) -> Optional[str]:
    for line in content.split("\n"):
        if line.strip():
            return line.strip()
    return None


def part_title(base_title: str, part: int) -> str:
    marker = f"(Part {part})"
    if "(Combined)" in base_title:
        return base_title.replace("(Combined)", marker).strip()
    return f"{base_title} {marker}"


def _excerpt(text: str) -> str:
    return text[:100]


def _parse_single(match: re.Match) -> ParsedQuestion:
    number = int(match.group(1))
    content = match.group(2).strip()
    title = first_line(content) or f"Question {number}"
    return ParsedQuestion(
        question_number=number,
        title=truncate_title(title),
        content=content,
        difficulty=determine_difficulty(content),
    )


def _parse_range(match: re.Match) -> List[ParsedQuestion]:
    start, end = int(match.group(1)), int(match.group(2))
    if end < start:
        logger.warning("Range Q%d-Q%d is descending, nothing to expand", start, end)
        return []

    content = match.group(3).strip()
    base_title = first_line(content) or f"Questions {start}-{end}"
    difficulty = determine_difficulty(content)
    return [
        ParsedQuestion(
            question_number=n,
            title=truncate_title(part_title(base_title, n - start + 1)),
            content=content,
            difficulty=difficulty,
        )
        for n in range(start, end + 1)
    ]


def parse_questions(content: str) -> ParsedFile:
    """
    Extract candidate questions from a markdown blob.
    Single headings come first (document order), then expanded ranges.
    A match that fails to parse is logged and counted, never raised.
    """
    parsed = ParsedFile()

    for m in SINGLE_RE.finditer(content):
        try:
            parsed.questions.append(_parse_single(m))
        except ValueError:
            logger.exception("Error parsing single question: %s", _excerpt(m.group(0)))
            parsed.error_count += 1

    for m in RANGE_RE.finditer(content):
        try:
            expanded = _parse_range(m)
        except ValueError:
            logger.exception("Error parsing question range: %s", _excerpt(m.group(0)))
            parsed.error_count += 1
            continue
        if not expanded:
            continue
        parsed.questions.extend(expanded)
        logger.info(
            "Expanded range Q%s-Q%s into %d individual questions",
            m.group(1),
            m.group(2),
            len(expanded),
        )

    return parsed


# --- Persistence ------------------------------------------------------------------


def _existing_numbers(db: Session, numbers: Iterable[int]) -> set[int]:
    numbers = list(set(numbers))
    if not numbers:
        return set()
    stmt = select(Question.question_number).where(Question.question_number.in_(numbers))
    return set(db.scalars(stmt).all())


def save_questions(
    db: Session, questions: List[ParsedQuestion], category_id: int, result: ImportResult
) -> None:
    """Insert non-duplicate records in one batch (question numbers are table-wide unique)."""
    taken = _existing_numbers(db, (q.question_number for q in questions))
    for q in questions:
        if q.question_number in taken:
            logger.warning("Question %s already exists, skipping", q.question_number)
            result.skipped_count += 1
            continue
        db.add(
            Question(
                question_number=q.question_number,
                title=q.title,
                content=q.content,
                difficulty=q.difficulty,
                category_id=category_id,
                is_published=True,
                view_count=0,
            )
        )
        taken.add(q.question_number)
        result.imported_count += 1
    db.commit()


def import_markdown_text(db: Session, content: str, category_id: int) -> ImportResult:
    parsed = parse_questions(content)
    logger.info("Parsed %d questions", len(parsed.questions))

    result = ImportResult(error_count=parsed.error_count)
    save_questions(db, parsed.questions, category_id, result)
    result.success = True
    return result


def import_markdown_file(db: Session, path: str | Path, category_id: int) -> ImportResult:
    """Import one file. Missing or unreadable files are reported, not raised."""
    p = Path(path)
    if not p.is_file():
        return ImportResult(error_message=f"File not found: {p}")

    try:
        result = import_markdown_text(db, p.read_text(encoding="utf-8"), category_id)
    except Exception as e:
        db.rollback()
        logger.exception("Error during import of %s", p)
        return ImportResult(error_message=str(e))

    logger.info(
        "Import completed: %d imported, %d skipped, %d errors",
        result.imported_count,
        result.skipped_count,
        result.error_count,
    )
    return result


def import_all_markdown_files(
    db: Session, base_dir: str | Path, mapping: Optional[Dict[str, int]] = None
) -> ImportResult:
    """Run every mapped file; totals accumulate and a failed file never stops the rest."""
    base = Path(base_dir)
    total = ImportResult()
    messages: List[str] = []

    for filename, category_id in (mapping or FILE_MAPPING).items():
        path = base / filename
        logger.info("Processing file: %s", path)
        result = import_markdown_file(db, path, category_id)

        total.imported_count += result.imported_count
        total.skipped_count += result.skipped_count
        total.error_count += result.error_count

        if not result.success:
            logger.error("Failed to import %s: %s", filename, result.error_message)
            total.error_count += 1
            messages.append(f"{filename}: {result.error_message}")

    total.success = total.error_count == 0
    total.error_message = "; ".join(messages) or None
    return total

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from categories import find_or_create_category
from importer import TITLE_MAX_LEN
from models import Category, Difficulty, Question
from rendering import render_markdown, strip_tags
from schemas.questions import QuestionCreate

logger = logging.getLogger("question-bank.authoring")


def record_view(db: Session, question_id: int) -> Optional[Question]:
    """
    Bump the view counter and make sure the rendered HTML is cached.
    Returns None when the question does not exist.
    """
    question = db.get(Question, question_id)
    if question is None:
        return None

    question.view_count = (question.view_count or 0) + 1
    if question.content_html is None:
        question.content_html = render_markdown(question.content)
    db.commit()
    db.refresh(question)
    return question


def validate_create(db: Session, data: QuestionCreate) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not (data.title or "").strip():
        errors["title"] = "Title is required"
    elif len(data.title.strip()) > TITLE_MAX_LEN:
        errors["title"] = f"Title must be at most {TITLE_MAX_LEN} characters"

    has_new_category = bool((data.new_category_name or "").strip())
    if not data.category_id and not has_new_category:
        errors["category_id"] = "Please select a category or create a new one"
    elif data.category_id and db.get(Category, data.category_id) is None:
        errors["category_id"] = f"Category {data.category_id} not found"

    if not (data.content_html or "").strip() and not (data.content or "").strip():
        errors["content"] = "Answer content is required"

    if data.difficulty and Difficulty.parse(data.difficulty) is None:
        errors["difficulty"] = "Difficulty must be one of: " + ", ".join(d.value for d in Difficulty)

    if data.question_number is not None and data.question_number < 0:
        errors["question_number"] = "Question number must be positive"
    elif data.question_number and _number_taken(db, data.question_number):
        errors["question_number"] = f"Question number {data.question_number} already exists"

    return errors


def _number_taken(db: Session, number: int) -> bool:
    return db.scalar(select(Question.id).where(Question.question_number == number)) is not None


def next_question_number(db: Session, category_id: int) -> int:
    """Max within the category plus one, skipping numbers other categories already use."""
    current = db.scalar(
        select(func.max(Question.question_number)).where(Question.category_id == category_id)
    )
    candidate = (current or 0) + 1
    while _number_taken(db, candidate):
        candidate += 1
    return candidate


def create_question(db: Session, data: QuestionCreate) -> Question:
    """Persist a validated submission (see validate_create)."""
    category_id = data.category_id
    if not category_id and (data.new_category_name or "").strip():
        category_id = find_or_create_category(
            db, data.new_category_name, data.new_category_icon, data.new_category_color
        ).id

    number = data.question_number or next_question_number(db, category_id)

    content = data.content or ""
    content_html = data.content_html
    if not (content_html or "").strip():
        content_html = render_markdown(content)
    else:
        # HTML wins; keep a tag-free copy as the source text
        content = strip_tags(content_html)

    question = Question(
        question_number=number,
        title=data.title.strip(),
        content=content,
        content_html=content_html,
        difficulty=Difficulty.parse(data.difficulty) or Difficulty.INTERMEDIATE,
        tags=(data.tags or "").strip() or None,
        category_id=category_id,
        is_published=data.is_published,
        view_count=0,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("Created question Q%s (id=%s) in category %s", number, question.id, category_id)
    return question

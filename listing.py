from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from models import Category, Difficulty, Question

PAGE_SIZE = 15


@dataclass
class QuestionPage:
    items: List[tuple[Question, Category]]
    total: int
    page: int
    total_pages: int


def total_pages_for(total: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total / page_size)


def list_questions(
    db: Session,
    category_id: Optional[int] = None,
    difficulty: Optional[str] = None,
    search_term: Optional[str] = None,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> QuestionPage:
    """
    One page of published questions, ordered by question number.

    - difficulty must be an exact display name ("Beginner", ...); anything else is ignored
    - search is a case-sensitive substring match on title, content or question number
    """
    page = max(1, page)
    conds = [Question.is_published.is_(True)]

    if category_id is not None:
        conds.append(Question.category_id == category_id)

    level = Difficulty.parse(difficulty)
    if level is not None:
        conds.append(Question.difficulty == level)

    if search_term:
        conds.append(
            or_(
                Question.title.contains(search_term, autoescape=True),
                Question.content.contains(search_term, autoescape=True),
                cast(Question.question_number, String).contains(search_term, autoescape=True),
            )
        )

    total = db.scalar(select(func.count(Question.id)).where(*conds)) or 0

    if (page - 1) * page_size >= total:
        # past the last page, no offset query
        return QuestionPage(
            items=[], total=total, page=page, total_pages=total_pages_for(total, page_size)
        )

    stmt = (
        select(Question, Category)
        .join(Category, Category.id == Question.category_id)
        .where(*conds)
        .order_by(Question.question_number, Question.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    items = [(q, c) for q, c in db.execute(stmt).all()]
    return QuestionPage(
        items=items, total=total, page=page, total_pages=total_pages_for(total, page_size)
    )


def category_counts(db: Session) -> List[tuple[Category, int]]:
    """Categories in display order with how many questions each holds."""
    stmt = (
        select(Category, func.count(Question.id))
        .outerjoin(Question, Question.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.display_order, Category.id)
    )
    return [(c, n) for c, n in db.execute(stmt).all()]


def site_totals(db: Session) -> dict:
    published = db.scalar(select(func.count(Question.id)).where(Question.is_published.is_(True)))
    views = db.scalar(select(func.coalesce(func.sum(Question.view_count), 0)))
    categories = db.scalar(select(func.count(Category.id)))
    return {
        "total_questions": published or 0,
        "total_categories": categories or 0,
        "total_views": int(views or 0),
    }

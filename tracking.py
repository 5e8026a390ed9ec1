# Per-user favorites and completion progress.
#
# Toggles are check-then-act without extra isolation; a concurrent toggle on the
# same (user, question) pair can lose an update. The unique constraints turn a
# double insert into an IntegrityError, which we resolve by reporting what's stored.
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Category, Question, User, UserFavorite, UserProgress

logger = logging.getLogger("question-bank.tracking")


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str] = None


def ensure_user(db: Session, user: CurrentUser) -> None:
    """
    Mirror the identity provider's key locally so favorites/progress can reference it.
    Must run before any other write in the session: losing the insert race rolls back.
    """
    row = db.get(User, user.id)
    if row is None:
        db.add(User(id=user.id, email=user.email))
        try:
            db.flush()
            return
        except IntegrityError:
            # another request mirrored the same user first
            db.rollback()
            logger.info("User %s was mirrored concurrently", user.id)
            row = db.get(User, user.id)
    if row is not None and user.email and row.email != user.email:
        row.email = user.email


def _favorite(db: Session, user_id: str, question_id: int) -> Optional[UserFavorite]:
    return db.scalar(
        select(UserFavorite).where(
            UserFavorite.user_id == user_id, UserFavorite.question_id == question_id
        )
    )


def _progress(db: Session, user_id: str, question_id: int) -> Optional[UserProgress]:
    return db.scalar(
        select(UserProgress).where(
            UserProgress.user_id == user_id, UserProgress.question_id == question_id
        )
    )


def toggle_favorite(db: Session, user: CurrentUser, question_id: int) -> bool:
    """Flip the favorite flag; returns True when the question is now a favorite."""
    ensure_user(db, user)
    favorite = _favorite(db, user.id, question_id)
    if favorite is None:
        db.add(UserFavorite(user_id=user.id, question_id=question_id, added_at=datetime.now(UTC)))
        now_favorite = True
    else:
        db.delete(favorite)
        now_favorite = False

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent favorite toggle for user=%s question=%s", user.id, question_id)
        return _favorite(db, user.id, question_id) is not None
    return now_favorite


def toggle_completed(db: Session, user: CurrentUser, question_id: int) -> bool:
    """Flip completion; completed_at is set on the way to True and cleared on the way back."""
    ensure_user(db, user)
    progress = _progress(db, user.id, question_id)
    if progress is None:
        progress = UserProgress(
            user_id=user.id,
            question_id=question_id,
            is_completed=True,
            completed_at=datetime.now(UTC),
        )
        db.add(progress)
    else:
        progress.is_completed = not progress.is_completed
        progress.completed_at = datetime.now(UTC) if progress.is_completed else None
    state = progress.is_completed

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent completion toggle for user=%s question=%s", user.id, question_id)
        stored = _progress(db, user.id, question_id)
        return bool(stored and stored.is_completed)
    return state


def flags_for(db: Session, user_id: str, question_id: int) -> tuple[bool, bool]:
    """(is_favorite, is_completed) for one user and question."""
    is_favorite = _favorite(db, user_id, question_id) is not None
    progress = _progress(db, user_id, question_id)
    return is_favorite, bool(progress and progress.is_completed)


def favorites_for(db: Session, user_id: str) -> List[tuple[UserFavorite, Question, Category]]:
    stmt = (
        select(UserFavorite, Question, Category)
        .join(Question, Question.id == UserFavorite.question_id)
        .join(Category, Category.id == Question.category_id)
        .where(UserFavorite.user_id == user_id)
        .order_by(UserFavorite.added_at.desc(), UserFavorite.id.desc())
    )
    return [tuple(row) for row in db.execute(stmt).all()]


def completed_for(db: Session, user_id: str) -> List[tuple[UserProgress, Question, Category]]:
    stmt = (
        select(UserProgress, Question, Category)
        .join(Question, Question.id == UserProgress.question_id)
        .join(Category, Category.id == Question.category_id)
        .where(UserProgress.user_id == user_id, UserProgress.is_completed.is_(True))
        .order_by(UserProgress.completed_at.desc(), UserProgress.id.desc())
    )
    return [tuple(row) for row in db.execute(stmt).all()]


def progress_summary(db: Session, completed_count: int) -> dict:
    total = db.scalar(select(func.count(Question.id))) or 0
    pct = round(completed_count * 100.0 / total, 1) if total > 0 else 0.0
    return {
        "total_questions": total,
        "completed_count": completed_count,
        "progress_percentage": pct,
    }

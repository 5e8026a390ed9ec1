# Per-user routes; all of them require a session from the identity provider.
from fastapi import APIRouter, Depends, HTTPException

from db import SessionLocal
from deps.auth import require_user
from models import Question
from schemas.questions import (
    FavoriteEntry,
    FavoritesView,
    ProgressEntry,
    ProgressView,
    ToggleCompletedOut,
    ToggleFavoriteOut,
    summarize,
)
from tracking import (
    CurrentUser,
    completed_for,
    favorites_for,
    progress_summary,
    toggle_completed,
    toggle_favorite,
)

router = APIRouter(prefix="/questions", tags=["tracking"])


def _require_question(db, question_id: int) -> None:
    if db.get(Question, question_id) is None:
        raise HTTPException(status_code=404, detail="question not found")


@router.post("/togglefavorite/{question_id}", response_model=ToggleFavoriteOut)
def toggle_favorite_route(question_id: int, user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        _require_question(db, question_id)
        state = toggle_favorite(db, user, question_id)
    return ToggleFavoriteOut(success=True, is_favorite=state)


@router.post("/togglecompleted/{question_id}", response_model=ToggleCompletedOut)
def toggle_completed_route(question_id: int, user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        _require_question(db, question_id)
        state = toggle_completed(db, user, question_id)
    return ToggleCompletedOut(success=True, is_completed=state)


@router.get("/myfavorites", response_model=FavoritesView)
def my_favorites(user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        rows = favorites_for(db, user.id)
        items = [FavoriteEntry(added_at=f.added_at, question=summarize(q, c)) for f, q, c in rows]
    return FavoritesView(items=items, count=len(items))


@router.get("/myprogress", response_model=ProgressView)
def my_progress(user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        rows = completed_for(db, user.id)
        items = [
            ProgressEntry(completed_at=p.completed_at, notes=p.notes, question=summarize(q, c))
            for p, q, c in rows
        ]
        summary = progress_summary(db, len(items))
    return ProgressView(items=items, **summary)

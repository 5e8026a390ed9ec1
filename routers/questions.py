from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from authoring import create_question, record_view, validate_create
from categories import ordered_categories
from db import SessionLocal
from deps.auth import optional_user, require_user
from listing import PAGE_SIZE, list_questions
from models import Category, Difficulty
from schemas.questions import (
    CategoryOut,
    FormErrors,
    ListFilters,
    QuestionCreate,
    QuestionCreated,
    QuestionDetail,
    QuestionForm,
    QuestionListPage,
    summarize,
)
from tracking import CurrentUser, flags_for

router = APIRouter(tags=["questions"])


@router.get("/questions", response_model=QuestionListPage)
def questions_index(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    difficulty: Optional[str] = None,
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    page: int = 1,
):
    with SessionLocal() as db:
        result = list_questions(
            db, category_id=category_id, difficulty=difficulty, search_term=search_term, page=page
        )
        categories = [CategoryOut.model_validate(c) for c in ordered_categories(db)]
        items = [summarize(q, c) for q, c in result.items]

    return QuestionListPage(
        items=items,
        page=result.page,
        total_pages=result.total_pages,
        total_count=result.total,
        page_size=PAGE_SIZE,
        filters=ListFilters(category_id=category_id, difficulty=difficulty, search_term=search_term),
        categories=categories,
    )


@router.get("/questions/category/{category_id}", response_model=QuestionListPage)
def questions_by_category(category_id: int, page: int = 1):
    with SessionLocal() as db:
        category = db.get(Category, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        result = list_questions(db, category_id=category_id, page=page)
        items = [summarize(q, c) for q, c in result.items]
        category_out = CategoryOut.model_validate(category)

    return QuestionListPage(
        items=items,
        page=result.page,
        total_pages=result.total_pages,
        total_count=result.total,
        page_size=PAGE_SIZE,
        filters=ListFilters(category_id=category_id),
        category=category_out,
    )


def _form(db, values: Optional[QuestionCreate] = None, errors: Optional[dict] = None) -> QuestionForm:
    return QuestionForm(
        categories=[CategoryOut.model_validate(c) for c in ordered_categories(db)],
        difficulties=[d.value for d in Difficulty],
        values=values,
        errors=errors or {},
    )


@router.get("/questions/create", response_model=QuestionForm)
def create_form(user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        return _form(db)


@router.post(
    "/questions/create",
    status_code=201,
    response_model=QuestionCreated,
    responses={422: {"model": FormErrors}},
)
def create(req: QuestionCreate, user: CurrentUser = Depends(require_user)):
    with SessionLocal() as db:
        errors = validate_create(db, req)
        if errors:
            body = FormErrors(errors=errors, form=_form(db, values=req, errors=errors))
            return JSONResponse(status_code=422, content=body.model_dump(mode="json"))

        q = create_question(db, req)
        return QuestionCreated(
            id=q.id,
            question_number=q.question_number,
            category_id=q.category_id,
            url=f"/questions/{q.id}",
        )


@router.get("/questions/{question_id}", response_model=QuestionDetail)
def question_detail(question_id: int, user: Optional[CurrentUser] = Depends(optional_user)):
    with SessionLocal() as db:
        q = record_view(db, question_id)
        if not q:
            raise HTTPException(status_code=404, detail="question not found")
        category = db.get(Category, q.category_id)

        is_favorite, is_completed = (False, False)
        if user is not None:
            is_favorite, is_completed = flags_for(db, user.id, q.id)

        summary = summarize(q, category)
        return QuestionDetail(
            **summary.model_dump(),
            content=q.content,
            content_html=q.content_html or "",
            modified_at=q.modified_at,
            is_published=q.is_published,
            category=CategoryOut.model_validate(category),
            is_favorite=is_favorite,
            is_completed=is_completed,
        )

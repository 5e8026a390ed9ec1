# View-models for question pages. Each route returns one of these instead of an
# untyped bag of values.
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color_code: Optional[str] = None
    display_order: int
    question_range_start: int
    question_range_end: int


class CategorySummary(CategoryOut):
    question_count: int


class QuestionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    question_number: int
    title: str
    difficulty: str
    tags: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    view_count: int
    created_at: Optional[datetime] = None


class QuestionDetail(QuestionSummary):
    content: str
    content_html: str
    modified_at: Optional[datetime] = None
    is_published: bool
    category: CategoryOut
    # only meaningful for an authenticated caller
    is_favorite: bool = False
    is_completed: bool = False


class ListFilters(BaseModel):
    category_id: Optional[int] = None
    difficulty: Optional[str] = None
    search_term: Optional[str] = None


class QuestionListPage(BaseModel):
    items: List[QuestionSummary]
    page: int
    total_pages: int
    total_count: int
    page_size: int
    filters: ListFilters
    categories: List[CategoryOut] = []
    # set on the category-scoped listing
    category: Optional[CategoryOut] = None


class HomeView(BaseModel):
    categories: List[CategorySummary]
    total_questions: int
    total_categories: int
    total_views: int


class QuestionCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    content_html: Optional[str] = None
    difficulty: Optional[str] = None
    tags: Optional[str] = None
    category_id: Optional[int] = None
    question_number: Optional[int] = None
    is_published: bool = True
    new_category_name: Optional[str] = None
    new_category_icon: Optional[str] = None
    new_category_color: Optional[str] = None


class QuestionForm(BaseModel):
    categories: List[CategoryOut]
    difficulties: List[str]
    values: Optional[QuestionCreate] = None
    errors: Dict[str, str] = {}


class QuestionCreated(BaseModel):
    ok: bool = True
    id: int
    question_number: int
    category_id: int
    url: str


class FormErrors(BaseModel):
    ok: bool = False
    errors: Dict[str, str]
    form: QuestionForm


class ToggleFavoriteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    success: bool = True
    is_favorite: bool = Field(alias="isFavorite")


class ToggleCompletedOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    success: bool = True
    is_completed: bool = Field(alias="isCompleted")


class FavoriteEntry(BaseModel):
    added_at: Optional[datetime] = None
    question: QuestionSummary


class ProgressEntry(BaseModel):
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    question: QuestionSummary


class FavoritesView(BaseModel):
    items: List[FavoriteEntry]
    count: int


class ProgressView(BaseModel):
    items: List[ProgressEntry]
    total_questions: int
    completed_count: int
    progress_percentage: float


def summarize(question, category=None) -> QuestionSummary:
    return QuestionSummary(
        id=question.id,
        question_number=question.question_number,
        title=question.title,
        difficulty=question.difficulty.value,
        tags=question.tags,
        category_id=question.category_id,
        category_name=category.name if category is not None else None,
        view_count=question.view_count,
        created_at=question.created_at,
    )

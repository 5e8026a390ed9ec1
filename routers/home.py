from fastapi import APIRouter

from db import SessionLocal
from listing import category_counts, site_totals
from schemas.questions import CategoryOut, CategorySummary, HomeView

router = APIRouter(tags=["home"])


@router.get("/", response_model=HomeView)
def home():
    with SessionLocal() as db:
        counts = category_counts(db)
        totals = site_totals(db)
        categories = [
            CategorySummary(**CategoryOut.model_validate(c).model_dump(), question_count=n)
            for c, n in counts
        ]
    return HomeView(categories=categories, **totals)

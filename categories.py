# Fixed seed categories. Question ranges are informational buckets only.
from __future__ import annotations

import logging

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from models import Category

logger = logging.getLogger("question-bank.categories")

DEFAULT_ICON = "fa-question-circle"
DEFAULT_COLOR = "#6c757d"
NEW_CATEGORY_RANGE_SIZE = 100

CATEGORIES = [
    {
        "id": 1,
        "name": "C# Fundamentals",
        "description": "Core C# programming concepts",
        "icon": "fa-code",
        "color_code": "#5B21B6",
        "display_order": 1,
        "question_range_start": 21,
        "question_range_end": 50,
    },
    {
        "id": 2,
        "name": "ASP.NET MVC",
        "description": "ASP.NET MVC and Web Development",
        "icon": "fa-globe",
        "color_code": "#059669",
        "display_order": 2,
        "question_range_start": 51,
        "question_range_end": 90,
    },
    {
        "id": 3,
        "name": "Advanced .NET",
        "description": "Advanced .NET & ASP.NET Core",
        "icon": "fa-rocket",
        "color_code": "#DC2626",
        "display_order": 3,
        "question_range_start": 91,
        "question_range_end": 99,
    },
    {
        "id": 4,
        "name": "Azure Cloud",
        "description": "Azure Cloud Services",
        "icon": "fa-cloud",
        "color_code": "#2563EB",
        "display_order": 4,
        "question_range_start": 100,
        "question_range_end": 120,
    },
    {
        "id": 5,
        "name": "DevOps & Microservices",
        "description": "DevOps, CI/CD and Microservices",
        "icon": "fa-cubes",
        "color_code": "#7C3AED",
        "display_order": 5,
        "question_range_start": 121,
        "question_range_end": 140,
    },
    {
        "id": 6,
        "name": "Advanced Microservices",
        "description": "Advanced Microservices Patterns",
        "icon": "fa-project-diagram",
        "color_code": "#EA580C",
        "display_order": 6,
        "question_range_start": 141,
        "question_range_end": 171,
    },
    {
        "id": 7,
        "name": "SQL Server & Database",
        "description": "SQL Server and Database concepts",
        "icon": "fa-database",
        "color_code": "#0891B2",
        "display_order": 7,
        "question_range_start": 172,
        "question_range_end": 200,
    },
]


def seed_categories(db: Session) -> int:
    """Insert whichever seed categories are missing. Returns how many were added."""
    existing = set(db.scalars(select(Category.id)).all())
    added = 0
    for row in CATEGORIES:
        if row["id"] in existing:
            continue
        db.add(Category(**row))
        added += 1
    if added:
        db.flush()
        if db.get_bind().dialect.name == "postgresql":
            # explicit ids leave the serial sequence behind
            db.execute(
                text(
                    "SELECT setval(pg_get_serial_sequence('categories', 'id'), "
                    "(SELECT MAX(id) FROM categories))"
                )
            )
        db.commit()
        logger.info("Seeded %d categories", added)
    return added


def ordered_categories(db: Session) -> list[Category]:
    return list(db.scalars(select(Category).order_by(Category.display_order, Category.id)).all())


def find_or_create_category(
    db: Session, name: str, icon: str | None = None, color: str | None = None
) -> Category:
    """
    Reuse a category whose name matches case-insensitively, otherwise append a
    new one after the last display slot and question range. Flushes, does not commit.
    """
    name = name.strip()
    existing = db.scalar(select(Category).where(func.lower(Category.name) == name.lower()))
    if existing is not None:
        return existing

    max_order = db.scalar(select(func.max(Category.display_order))) or 0
    max_range_end = db.scalar(select(func.max(Category.question_range_end))) or 0

    category = Category(
        name=name,
        icon=icon.strip() if icon and icon.strip() else DEFAULT_ICON,
        color_code=color.strip() if color and color.strip() else DEFAULT_COLOR,
        display_order=max_order + 1,
        question_range_start=max_range_end + 1,
        question_range_end=max_range_end + NEW_CATEGORY_RANGE_SIZE,
        description=f"Questions related to {name}",
    )
    db.add(category)
    db.flush()
    logger.info("Created category %r (id=%s)", category.name, category.id)
    return category

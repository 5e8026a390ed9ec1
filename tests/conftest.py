import os
import tempfile

# must happen before db.py is imported anywhere
_TMP = tempfile.mkdtemp(prefix="question-bank-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP, "test.db")
os.environ["IDENTITY_JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ.pop("IDENTITY_JWT_AUDIENCE", None)

import jwt  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from db import SessionLocal, init_db  # noqa: E402
from models import Category, Difficulty, Question, User, UserFavorite, UserProgress  # noqa: E402

init_db()


def make_token(user_id: str, email: str | None = None) -> str:
    payload = {"sub": user_id}
    if email:
        payload["email"] = email
    return jwt.encode(payload, os.environ["IDENTITY_JWT_SECRET"], algorithm="HS256")


def auth(user_id: str = "user-1") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, f'{user_id}@example.com')}"}


@pytest.fixture(autouse=True)
def clean_db():
    with SessionLocal() as db:
        db.execute(delete(UserProgress))
        db.execute(delete(UserFavorite))
        db.execute(delete(Question))
        db.execute(delete(User))
        db.execute(delete(Category).where(Category.id > 7))
        db.commit()
    init_db()
    yield


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def add_question():
    """Insert a question directly; returns its id."""

    def _add(number: int, category_id: int = 1, **fields) -> int:
        values = {
            "title": f"Question {number}",
            "content": f"Body of question {number}",
            "difficulty": Difficulty.INTERMEDIATE,
            "is_published": True,
            "view_count": 0,
        }
        values.update(fields)
        with SessionLocal() as s:
            q = Question(question_number=number, category_id=category_id, **values)
            s.add(q)
            s.commit()
            return q.id

    return _add

from fastapi import APIRouter
from sqlalchemy import func, select, text

from alembic.config import Config
from alembic.script import ScriptDirectory
from db import engine
from models import Question

router = APIRouter(prefix="/health", tags=["health"])


def _alembic_heads() -> list[str]:
    script = ScriptDirectory.from_config(Config("alembic.ini"))
    return list(script.get_heads())


@router.get("/db")
def health_db():
    """Connectivity, question count and whether the schema is at the Alembic head."""
    try:
        heads = _alembic_heads()
    except Exception:
        heads = []

    try:
        with engine.connect() as conn:
            questions = conn.execute(select(func.count(Question.id))).scalar_one()
            try:
                db_version = conn.execute(
                    text("SELECT version_num FROM alembic_version")
                ).scalar_one_or_none()
            except Exception:
                db_version = None
    except Exception as e:
        return {"ok": False, "error": f"db_error: {type(e).__name__}: {e}", "code_heads": heads}

    return {
        "ok": True,
        "questions": questions,
        "db_version": db_version,
        "code_heads": heads,
        "migrations_synced": bool(heads) and db_version in heads,
    }

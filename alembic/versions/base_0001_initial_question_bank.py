"""initial question bank schema

Revision ID: base_0001
Revises:
Create Date: 2025-12-09 12:08:48

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "base_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    categories = op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=True),
        sa.Column("color_code", sa.String(length=50), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("question_range_start", sa.Integer(), nullable=False),
        sa.Column("question_range_end", sa.Integer(), nullable=False),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("question_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_html", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(length=20), nullable=False),
        sa.Column("tags", sa.String(length=200), nullable=True),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey(
                "categories.id", ondelete="RESTRICT", name="fk_questions_category_id_categories"
            ),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.UniqueConstraint("question_number", name="uq_questions_question_number"),
    )
    op.create_index("ix_questions_category_id", "questions", ["category_id"])
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    for table, stamp in (("user_favorites", "added_at"), ("user_progress", None)):
        cols = [
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "user_id",
                sa.String(length=64),
                sa.ForeignKey("users.id", ondelete="CASCADE", name=f"fk_{table}_user_id_users"),
                nullable=False,
            ),
            sa.Column(
                "question_id",
                sa.Integer(),
                sa.ForeignKey(
                    "questions.id", ondelete="CASCADE", name=f"fk_{table}_question_id_questions"
                ),
                nullable=False,
            ),
        ]
        if stamp:
            cols.append(sa.Column(stamp, sa.DateTime(timezone=True), nullable=False))
        else:
            cols += [
                sa.Column("is_completed", sa.Boolean(), nullable=False),
                sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
                sa.Column("notes", sa.Text(), nullable=True),
            ]
        op.create_table(
            table,
            *cols,
            sa.UniqueConstraint("user_id", "question_id", name=f"uq_{table}_user_id_question_id"),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_question_id", table, ["question_id"])

    # seed rows live in categories.py so the app and the migration agree
    from categories import CATEGORIES

    op.bulk_insert(categories, CATEGORIES)
    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "SELECT setval(pg_get_serial_sequence('categories', 'id'), (SELECT MAX(id) FROM categories))"
        )


def downgrade() -> None:
    for table in ("user_progress", "user_favorites"):
        op.drop_index(f"ix_{table}_question_id", table_name=table)
        op.drop_index(f"ix_{table}_user_id", table_name=table)
        op.drop_table(table)
    op.drop_table("users")
    op.drop_index("ix_questions_category_id", table_name="questions")
    op.drop_table("questions")
    op.drop_table("categories")

from sqlalchemy import func, select

from importer import import_all_markdown_files, import_markdown_file, import_markdown_text
from models import Difficulty, Question


def _count(db):
    return db.scalar(select(func.count(Question.id)))


def test_import_single_question(db):
    result = import_markdown_text(db, "## Q5: Title\nBody text", category_id=3)
    assert result.success is True
    assert (result.imported_count, result.skipped_count, result.error_count) == (1, 0, 0)

    q = db.scalar(select(Question))
    assert q.question_number == 5
    assert q.category_id == 3
    assert q.difficulty == Difficulty.INTERMEDIATE
    assert q.title == "Title"
    assert q.is_published is True
    assert q.view_count == 0
    assert q.content_html is None


def test_import_range(db):
    result = import_markdown_text(db, "## Q10-Q12: Combined Title\nShared body", category_id=2)
    assert result.imported_count == 3
    rows = db.scalars(select(Question).order_by(Question.question_number)).all()
    assert [r.question_number for r in rows] == [10, 11, 12]
    assert all("Shared body" in r.content for r in rows)


def test_reimport_skips_existing_numbers(db):
    text = "## Q1: One\na\n## Q2: Two\nb\n## Q3: Three\nc"
    import_markdown_text(db, text, category_id=1)
    again = import_markdown_text(db, text, category_id=1)
    assert again.success is True
    assert again.imported_count == 0
    assert again.skipped_count == 3
    assert _count(db) == 3


def test_duplicate_check_spans_categories(db):
    import_markdown_text(db, "## Q5: In one\nbody", category_id=1)
    result = import_markdown_text(db, "## Q5: In two\nbody", category_id=2)
    assert result.skipped_count == 1
    assert db.scalar(select(Question.category_id)) == 1


def test_duplicate_within_one_file(db):
    result = import_markdown_text(db, "## Q4: First\na\n## Q4: Again\nb", category_id=1)
    assert (result.imported_count, result.skipped_count) == (1, 1)
    assert _count(db) == 1


def test_descending_range_imports_nothing_without_error(db):
    result = import_markdown_text(db, "## Q9-Q3: Backwards\nx\n## Q30: Fine\ny", category_id=1)
    assert result.success is True
    assert result.error_count == 0
    assert result.imported_count == 1


def test_missing_file_reports_without_raising(db, tmp_path):
    result = import_markdown_file(db, tmp_path / "nope.md", 1)
    assert result.success is False
    assert "File not found" in result.error_message
    assert _count(db) == 0


def test_import_file(db, tmp_path):
    p = tmp_path / "batch.md"
    p.write_text("# Batch\n\n## Q51: What is MVC?\nModel view controller.\n", encoding="utf-8")
    result = import_markdown_file(db, p, 2)
    assert result.success is True
    assert result.imported_count == 1
    q = db.scalar(select(Question))
    assert q.difficulty == Difficulty.BEGINNER


def test_unknown_category_is_a_file_level_failure(db, tmp_path):
    p = tmp_path / "orphans.md"
    p.write_text("## Q1: Orphan\nbody", encoding="utf-8")
    result = import_markdown_file(db, p, 999)
    assert result.success is False
    assert result.error_message
    assert _count(db) == 0


def test_import_all_accumulates_and_continues(db, tmp_path):
    (tmp_path / "a.md").write_text("## Q1: A\nx\n## Q2: B\ny", encoding="utf-8")
    (tmp_path / "c.md").write_text("## Q2: Dup\nz\n## Q3: C\nw", encoding="utf-8")
    mapping = {"a.md": 1, "missing.md": 2, "c.md": 3}

    total = import_all_markdown_files(db, tmp_path, mapping)
    assert total.imported_count == 3
    assert total.skipped_count == 1
    assert total.error_count == 1
    assert total.success is False
    assert "missing.md" in total.error_message
    assert _count(db) == 3


def test_import_all_success_when_everything_loads(db, tmp_path):
    (tmp_path / "a.md").write_text("## Q1: A\nx", encoding="utf-8")
    total = import_all_markdown_files(db, tmp_path, {"a.md": 1})
    assert total.success is True
    assert total.error_message is None
    assert str(total) == "Success: True, Imported: 1, Skipped: 0, Errors: 0"

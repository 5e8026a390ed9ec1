from cli import collapse_ranges, collect_stats, find_missing, main
from models import Difficulty


def test_find_missing():
    assert find_missing([]) == []
    assert find_missing([3, 4, 5]) == []
    assert find_missing([1, 2, 5, 9]) == [3, 4, 6, 7, 8]


def test_collapse_ranges():
    assert collapse_ranges([]) == []
    assert collapse_ranges([5, 7, 8, 9]) == ["Q5", "Q7-Q9"]
    assert collapse_ranges([1, 2, 4]) == ["Q1-Q2", "Q4"]


def test_collect_stats(db, add_question):
    add_question(21, category_id=1, difficulty=Difficulty.BEGINNER)
    add_question(25, category_id=1)
    add_question(172, category_id=7, difficulty=Difficulty.ADVANCED)

    stats = collect_stats(db)
    assert stats["total"] == 3
    assert stats["min_number"] == 21
    assert stats["max_number"] == 172
    assert dict(stats["by_category"])["C# Fundamentals"] == 2
    assert dict(stats["by_category"])["Azure Cloud"] == 0
    assert dict(stats["by_difficulty"]) == {"Advanced": 1, "Beginner": 1, "Intermediate": 1}


def test_commands_run(add_question, tmp_path):
    add_question(1)
    add_question(4)
    assert main(["verify"]) == 0
    assert main(["gaps"]) == 0
    # nothing from the fixed mapping exists here, so every file fails
    assert main(["import", "--base-dir", str(tmp_path)]) == 1

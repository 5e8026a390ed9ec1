from fastapi.testclient import TestClient

from listing import PAGE_SIZE, list_questions, total_pages_for
from main import app
from models import Difficulty

client = TestClient(app)


def test_only_published_sorted_by_number(db, add_question):
    add_question(30)
    add_question(10)
    add_question(20, is_published=False)
    page = list_questions(db)
    assert [q.question_number for q, _ in page.items] == [10, 30]
    assert page.total == 2
    assert page.total_pages == 1


def test_pagination(db, add_question):
    for n in range(1, 21):
        add_question(n)
    first = list_questions(db, page=1)
    second = list_questions(db, page=2)
    assert len(first.items) == PAGE_SIZE
    assert [q.question_number for q, _ in second.items] == [16, 17, 18, 19, 20]
    assert first.total == 20
    assert first.total_pages == 2
    assert list_questions(db, page=3).items == []


def test_page_below_one_is_clamped(db, add_question):
    add_question(1)
    page = list_questions(db, page=0)
    assert page.page == 1
    assert len(page.items) == 1


def test_total_pages_for():
    assert total_pages_for(0) == 0
    assert total_pages_for(15) == 1
    assert total_pages_for(16) == 2


def test_category_and_difficulty_filters(db, add_question):
    add_question(1, category_id=1, difficulty=Difficulty.BEGINNER)
    add_question(2, category_id=1, difficulty=Difficulty.ADVANCED)
    add_question(3, category_id=2, difficulty=Difficulty.ADVANCED)

    page = list_questions(db, category_id=1, difficulty="Advanced")
    assert [q.question_number for q, _ in page.items] == [2]

    # unknown or wrongly-cased difficulty is ignored
    page = list_questions(db, category_id=1, difficulty="advanced")
    assert [q.question_number for q, _ in page.items] == [1, 2]


def test_search_title_content_and_number(db, add_question):
    add_question(7, title="Dependency injection", content="Lifetimes")
    add_question(8, title="Middleware", content="Request pipeline and Dependency graphs")
    add_question(170, title="Other", content="Nothing")

    page = list_questions(db, search_term="Dependency")
    assert [q.question_number for q, _ in page.items] == [7, 8]

    page = list_questions(db, search_term="17")
    assert [q.question_number for q, _ in page.items] == [170]


def test_search_is_case_sensitive(db, add_question):
    add_question(1, title="Garbage Collection", content="gen0 gen1 gen2")
    assert list_questions(db, search_term="Garbage").total == 1
    assert list_questions(db, search_term="garbage").total == 0


def test_search_treats_wildcards_literally(db, add_question):
    add_question(1, title="100% coverage")
    add_question(2, title="Plain")
    assert list_questions(db, search_term="%").total == 1


def test_index_route(add_question):
    add_question(2, category_id=1, difficulty=Difficulty.BEGINNER)
    add_question(1, category_id=2)
    r = client.get("/questions", params={"categoryId": 1, "difficulty": "Beginner", "page": 1})
    assert r.status_code == 200
    body = r.json()
    assert body["total_count"] == 1
    assert body["total_pages"] == 1
    assert body["page"] == 1
    assert body["filters"] == {"category_id": 1, "difficulty": "Beginner", "search_term": None}
    assert len(body["categories"]) == 7
    item = body["items"][0]
    assert item["question_number"] == 2
    assert item["difficulty"] == "Beginner"
    assert item["category_name"] == "C# Fundamentals"


def test_index_search_route(add_question):
    add_question(1, title="Async streams")
    r = client.get("/questions", params={"searchTerm": "Async"})
    assert r.json()["total_count"] == 1


def test_category_route(add_question):
    add_question(5, category_id=4)
    add_question(6, category_id=5)
    r = client.get("/questions/category/4")
    assert r.status_code == 200
    body = r.json()
    assert body["category"]["name"] == "Azure Cloud"
    assert [i["question_number"] for i in body["items"]] == [5]


def test_category_route_404():
    r = client.get("/questions/category/999")
    assert r.status_code == 404


def test_page_far_past_the_end_is_empty(db, add_question):
    add_question(1)
    page = list_questions(db, page=10**18)
    assert page.items == []
    assert page.total == 1
    assert page.total_pages == 1
    assert page.page == 10**18


def test_huge_page_routes_return_empty_pages(add_question):
    add_question(1, category_id=1)
    r = client.get("/questions", params={"page": 10**18})
    assert r.status_code == 200
    assert r.json()["items"] == []
    assert r.json()["total_count"] == 1

    r = client.get("/questions/category/1", params={"page": 10**18})
    assert r.status_code == 200
    assert r.json()["items"] == []

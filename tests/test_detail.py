from fastapi.testclient import TestClient

from conftest import auth
from db import SessionLocal
from main import app
from models import Question

client = TestClient(app)


def test_view_count_increments_by_one(add_question):
    qid = add_question(1, content="# Heading\n\nSome **bold** text")
    for expected in (1, 2, 3):
        r = client.get(f"/questions/{qid}")
        assert r.status_code == 200
        assert r.json()["view_count"] == expected

    with SessionLocal() as s:
        assert s.get(Question, qid).view_count == 3


def test_html_is_rendered_and_cached(add_question):
    qid = add_question(1, content="Some **bold** text")
    body = client.get(f"/questions/{qid}").json()
    assert "<strong>bold</strong>" in body["content_html"]
    assert body["category"]["id"] == 1

    with SessionLocal() as s:
        assert "<strong>bold</strong>" in s.get(Question, qid).content_html


def test_anonymous_flags_are_false(add_question):
    qid = add_question(1)
    body = client.get(f"/questions/{qid}").json()
    assert body["is_favorite"] is False
    assert body["is_completed"] is False


def test_flags_for_signed_in_user(add_question):
    qid = add_question(1)
    client.post(f"/questions/togglefavorite/{qid}", headers=auth("alice"))
    client.post(f"/questions/togglecompleted/{qid}", headers=auth("alice"))

    mine = client.get(f"/questions/{qid}", headers=auth("alice")).json()
    assert mine["is_favorite"] is True
    assert mine["is_completed"] is True

    theirs = client.get(f"/questions/{qid}", headers=auth("bob")).json()
    assert theirs["is_favorite"] is False
    assert theirs["is_completed"] is False


def test_bad_token_is_anonymous_on_detail(add_question):
    qid = add_question(1)
    r = client.get(f"/questions/{qid}", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 200
    assert r.json()["is_favorite"] is False


def test_detail_404():
    r = client.get("/questions/424242")
    assert r.status_code == 404

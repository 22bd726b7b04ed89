"""
tests/test_posts.py - Feed, likes and comments
"""

from __future__ import annotations

from datetime import datetime, timedelta

from bson import ObjectId


def _create(client, headers, content="Hello batch of 2020!"):
    resp = client.post("/api/posts", json={"content": content, "tags": ["reunion"]}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["data"]


class TestCreateAndList:
    def test_create_sets_author_from_session(self, client, student):
        user, headers = student
        post = _create(client, headers)
        assert post["author"]["id"] == user["id"]
        assert post["author"]["name"] == "Sam Student"
        assert post["likes"] == [] and post["comments"] == []

    def test_blank_content_rejected(self, client, student):
        _, headers = student
        assert client.post("/api/posts", json={"content": "   "}, headers=headers).status_code == 422

    def test_too_long_content_rejected(self, client, student):
        _, headers = student
        assert client.post("/api/posts", json={"content": "x" * 1001}, headers=headers).status_code == 422

    def test_create_requires_auth(self, client):
        assert client.post("/api/posts", json={"content": "hi"}).status_code in (401, 403)

    def test_feed_is_newest_first_and_paginated(self, client, db):
        base = datetime(2025, 1, 1)
        db["Posts"].insert_many([
            {"content": f"post {i}", "author": {"id": "a"}, "likes": [], "comments": [],
             "createdAt": base + timedelta(minutes=i)}
            for i in range(3)
        ])

        first = client.get("/api/posts", params={"limit": 2}).json()
        assert [p["content"] for p in first["data"]] == ["post 2", "post 1"]
        assert first["total"] == 3
        assert first["hasMore"] is True

        second = client.get("/api/posts", params={"limit": 2, "page": 2}).json()
        assert [p["content"] for p in second["data"]] == ["post 0"]
        assert second["hasMore"] is False

    def test_feed_filtered_by_author(self, client, student, alumnus):
        s_user, s_headers = student
        _, a_headers = alumnus
        _create(client, s_headers, "mine")
        _create(client, a_headers, "theirs")

        body = client.get("/api/posts", params={"userId": s_user["id"]}).json()
        assert [p["content"] for p in body["data"]] == ["mine"]

    def test_get_missing_post(self, client):
        assert client.get(f"/api/posts/{ObjectId()}").status_code == 404


class TestActions:
    def test_like_toggles(self, client, student, alumnus):
        _, s_headers = student
        a_user, a_headers = alumnus
        post = _create(client, s_headers)
        url = f"/api/posts/{post['_id']}"

        liked = client.put(url, json={"action": "like"}, headers=a_headers).json()
        assert liked["data"]["likes"] == [a_user["id"]]

        unliked = client.put(url, json={"action": "like"}, headers=a_headers).json()
        assert unliked["data"]["likes"] == []

    def test_comment_appends_with_author(self, client, student, alumnus):
        _, s_headers = student
        a_user, a_headers = alumnus
        post = _create(client, s_headers)
        url = f"/api/posts/{post['_id']}"

        client.put(url, json={"action": "comment", "comment": {"content": "Congrats!"}}, headers=a_headers)
        resp = client.put(url, json={"action": "comment", "comment": {"content": "See you"}}, headers=s_headers)
        comments = resp.json()["data"]["comments"]
        assert [c["content"] for c in comments] == ["Congrats!", "See you"]
        assert comments[0]["author"]["id"] == a_user["id"]
        assert comments[0]["id"] != comments[1]["id"]

    def test_comment_without_body(self, client, student):
        _, headers = student
        post = _create(client, headers)
        resp = client.put(f"/api/posts/{post['_id']}", json={"action": "comment"}, headers=headers)
        assert resp.status_code == 400

    def test_unknown_action(self, client, student):
        _, headers = student
        post = _create(client, headers)
        resp = client.put(f"/api/posts/{post['_id']}", json={"action": "share"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid action"


class TestDelete:
    def test_author_can_delete(self, client, db, student):
        _, headers = student
        post = _create(client, headers)
        assert client.delete(f"/api/posts/{post['_id']}", headers=headers).status_code == 200
        assert db["Posts"].count_documents({}) == 0

    def test_other_user_cannot_delete(self, client, student, alumnus):
        _, s_headers = student
        _, a_headers = alumnus
        post = _create(client, s_headers)
        assert client.delete(f"/api/posts/{post['_id']}", headers=a_headers).status_code == 403

    def test_admin_can_delete(self, client, student, admin):
        _, s_headers = student
        _, a_headers = admin
        post = _create(client, s_headers)
        assert client.delete(f"/api/posts/{post['_id']}", headers=a_headers).status_code == 200

    def test_bad_id(self, client, student):
        _, headers = student
        assert client.delete("/api/posts/not-an-id", headers=headers).status_code == 400

"""
tests/test_chat.py - Conversations between connected users
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from bson import ObjectId


@pytest.fixture
def pair(db, student, alumnus):
    """Two connected users."""
    s_user, s_headers = student
    a_user, a_headers = alumnus
    db["connections"].insert_one({"user1Id": s_user["id"], "user2Id": a_user["id"], "createdAt": datetime.utcnow()})
    return (s_user, s_headers), (a_user, a_headers)


def _open(client, headers, participant_id):
    return client.post("/api/chat/conversations", json={"participantId": participant_id}, headers=headers)


def _conversation_id(client, pair):
    (_, s_headers), (a_user, _) = pair
    return _open(client, s_headers, a_user["id"]).json()["conversation"]["_id"]


class TestConversations:
    def test_open_creates_then_reuses(self, client, db, pair):
        (s_user, s_headers), (a_user, a_headers) = pair

        first = _open(client, s_headers, a_user["id"])
        assert first.status_code == 201
        assert first.json()["isNew"] is True
        conversation = first.json()["conversation"]
        assert conversation["unreadCounts"] == {s_user["id"]: 0, a_user["id"]: 0}

        second = _open(client, a_headers, s_user["id"])
        assert second.status_code == 200
        assert second.json()["isNew"] is False
        assert second.json()["conversation"]["_id"] == conversation["_id"]
        assert db["conversations"].count_documents({}) == 1

    def test_requires_connection(self, client, student, make_user):
        _, headers = student
        stranger, _ = make_user("Stan Stranger")
        assert _open(client, headers, stranger["id"]).status_code == 403

    def test_not_with_self(self, client, student):
        user, headers = student
        assert _open(client, headers, user["id"]).status_code == 400

    def test_unknown_participant(self, client, student):
        _, headers = student
        assert _open(client, headers, str(ObjectId())).status_code == 404

    def test_list_includes_other_user_and_unread(self, client, pair):
        (s_user, s_headers), (a_user, a_headers) = pair
        conversation_id = _conversation_id(client, pair)
        client.post("/api/chat/messages", json={"conversationId": conversation_id, "content": "hey"}, headers=s_headers)

        listed = client.get("/api/chat/conversations", headers=a_headers).json()["conversations"]
        assert len(listed) == 1
        assert listed[0]["otherUser"]["name"] == "Sam Student"
        assert "password" not in listed[0]["otherUser"]
        assert listed[0]["unreadCount"] == 1
        assert listed[0]["lastMessage"]["content"] == "hey"


class TestMessages:
    def test_send_bumps_only_recipient_unread(self, client, db, pair):
        (s_user, s_headers), (a_user, _) = pair
        conversation_id = _conversation_id(client, pair)

        resp = client.post(
            "/api/chat/messages",
            json={"conversationId": conversation_id, "content": "  Hello!  "},
            headers=s_headers
        )
        assert resp.status_code == 201
        message = resp.json()["message"]
        assert message["content"] == "Hello!"
        assert message["readBy"] == [s_user["id"]]
        assert message["sender"]["name"] == "Sam Student"

        counts = db["conversations"].find_one()["unreadCounts"]
        assert counts == {s_user["id"]: 0, a_user["id"]: 1}

    def test_blank_message_rejected(self, client, pair):
        (_, s_headers), _ = pair
        conversation_id = _conversation_id(client, pair)
        resp = client.post("/api/chat/messages", json={"conversationId": conversation_id, "content": "   "},
                           headers=s_headers)
        assert resp.status_code == 422

    def test_outsider_cannot_read_or_post(self, client, pair, make_user):
        conversation_id = _conversation_id(client, pair)
        _, headers = make_user("Eve Outsider")
        assert client.get("/api/chat/messages", params={"conversationId": conversation_id},
                          headers=headers).status_code == 404
        assert client.post("/api/chat/messages", json={"conversationId": conversation_id, "content": "hi"},
                           headers=headers).status_code == 404

    def test_mark_read_and_unread_total(self, client, db, pair):
        (s_user, s_headers), (a_user, a_headers) = pair
        conversation_id = _conversation_id(client, pair)
        for text in ("one", "two"):
            client.post("/api/chat/messages", json={"conversationId": conversation_id, "content": text},
                        headers=s_headers)

        assert client.get("/api/chat/unread-count", headers=a_headers).json()["unreadCount"] == 2

        client.put("/api/chat/messages", json={"conversationId": conversation_id}, headers=a_headers)
        assert client.get("/api/chat/unread-count", headers=a_headers).json()["unreadCount"] == 0
        assert all(a_user["id"] in m["readBy"] for m in db["messages"].find())

    def test_pages_count_back_from_newest(self, client, db, pair):
        (_, s_headers), _ = pair
        conversation_id = _conversation_id(client, pair)
        base = datetime(2025, 6, 1)
        db["messages"].insert_many([
            {"conversationId": conversation_id, "senderId": "x", "content": f"m{i}", "readBy": [],
             "createdAt": base + timedelta(seconds=i)}
            for i in range(5)
        ])

        page1 = client.get("/api/chat/messages", params={"conversationId": conversation_id, "limit": 2},
                           headers=s_headers).json()
        assert [m["content"] for m in page1["messages"]] == ["m3", "m4"]
        assert page1["hasMore"] is True

        page3 = client.get("/api/chat/messages", params={"conversationId": conversation_id, "limit": 2, "page": 3},
                           headers=s_headers).json()
        assert [m["content"] for m in page3["messages"]] == ["m0"]
        assert page3["hasMore"] is False

    def test_clear_conversation(self, client, db, pair):
        (_, s_headers), (_, a_headers) = pair
        conversation_id = _conversation_id(client, pair)
        client.post("/api/chat/messages", json={"conversationId": conversation_id, "content": "bye"},
                    headers=s_headers)

        resp = client.delete(f"/api/chat/conversations/{conversation_id}/messages", headers=a_headers)
        assert resp.json()["deletedCount"] == 1
        assert db["messages"].count_documents({}) == 0
        assert db["conversations"].find_one()["lastMessage"] is None

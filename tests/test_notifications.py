"""
tests/test_notifications.py - Notification inbox
"""

from __future__ import annotations

from datetime import datetime, timedelta

from bson import ObjectId

from alumnisetu.services.notification_service import notify, notify_admins


def _seed(db, user_id, count=3, read=False):
    base = datetime(2025, 5, 1)
    db["notifications"].insert_many([
        {"userId": user_id, "type": "system", "message": f"note {i}", "link": None,
         "read": read, "createdAt": base + timedelta(minutes=i)}
        for i in range(count)
    ])


class TestService:
    def test_notify_writes_unread_document(self, db):
        note_id = notify("u1", "connection", "Hi", link="/connections", requestId="r1")
        doc = db["notifications"].find_one({"_id": ObjectId(note_id)})
        assert doc["read"] is False
        assert doc["requestId"] == "r1"

    def test_notify_admins_counts(self, db, admin, make_user):
        make_user("Other Admin", role="admin")
        make_user("Not Admin", role="student")
        assert notify_admins("job", "Review please") == 2
        assert db["notifications"].count_documents({}) == 2

    def test_notify_admins_without_admins(self, db):
        assert notify_admins("job", "Review please") == 0


class TestRoutes:
    def test_list_newest_first_with_unread_count(self, client, db, student, alumnus):
        s_user, headers = student
        a_user, _ = alumnus
        _seed(db, s_user["id"])
        _seed(db, a_user["id"])
        db["notifications"].update_one({"message": "note 0", "userId": s_user["id"]}, {"$set": {"read": True}})

        body = client.get("/api/notifications", headers=headers).json()
        assert [n["message"] for n in body["notifications"]] == ["note 2", "note 1", "note 0"]
        assert body["unreadCount"] == 2

    def test_list_is_capped(self, client, db, student, monkeypatch):
        from alumnisetu.api.routes import notification_routes
        monkeypatch.setattr(notification_routes.settings, "notification_limit", 2)
        user, headers = student
        _seed(db, user["id"], count=4)
        body = client.get("/api/notifications", headers=headers).json()
        assert len(body["notifications"]) == 2
        assert body["unreadCount"] == 4

    def test_mark_one_read(self, client, db, student):
        user, headers = student
        _seed(db, user["id"], count=1)
        note_id = str(db["notifications"].find_one()["_id"])

        resp = client.patch("/api/notifications", json={"notificationId": note_id}, headers=headers)
        assert resp.status_code == 200
        assert db["notifications"].find_one()["read"] is True

    def test_mark_all_read(self, client, db, student, alumnus):
        user, headers = student
        other, _ = alumnus
        _seed(db, user["id"])
        _seed(db, other["id"])

        resp = client.post("/api/notifications/mark-read", headers=headers)
        assert resp.json()["updated"] == 3
        assert db["notifications"].count_documents({"userId": other["id"], "read": False}) == 3

    def test_set_unread(self, client, db, student):
        user, headers = student
        _seed(db, user["id"], count=1, read=True)
        note_id = str(db["notifications"].find_one()["_id"])
        resp = client.patch(f"/api/notifications/{note_id}", json={"read": False}, headers=headers)
        assert resp.status_code == 200
        assert db["notifications"].find_one()["read"] is False

    def test_cannot_touch_someone_elses(self, client, db, student, alumnus):
        _, headers = student
        other, _ = alumnus
        _seed(db, other["id"], count=1)
        note_id = str(db["notifications"].find_one()["_id"])

        assert client.patch(f"/api/notifications/{note_id}", json={"read": True}, headers=headers).status_code == 404
        assert client.delete(f"/api/notifications/{note_id}", headers=headers).status_code == 404
        assert db["notifications"].count_documents({}) == 1

    def test_delete(self, client, db, student):
        user, headers = student
        _seed(db, user["id"], count=1)
        note_id = str(db["notifications"].find_one()["_id"])
        assert client.delete(f"/api/notifications/{note_id}", headers=headers).status_code == 200
        assert db["notifications"].count_documents({}) == 0

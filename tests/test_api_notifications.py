"""HTTP tests for the notification inbox."""

from datetime import timedelta

import pytest

from fintrack.models.notification import Notification

from tests.factories import NOW, make_allocation


@pytest.fixture
def delivered(scheduler, job_queue, worker, user, allocation):
    """Two fired reminders, so the inbox holds two unread notifications."""
    notifications = []
    for title in ("Electricity", "Internet bill"):
        reminder, _ = scheduler.create(user.id, allocation.id, title, 100000, NOW + timedelta(days=1))
        notifications.append(job_queue.fire(reminder.job_id, worker))
    return notifications


def inbox(client, auth_headers):
    response = client.get("/notification", headers=auth_headers)
    assert response.status_code == 200
    return response.json()


class TestNotificationInbox:
    def test_lists_newest_first_with_unread_count(self, client, auth_headers, delivered):
        body = inbox(client, auth_headers)

        assert body["status"] is True
        assert body["totalNotification"] == 2
        assert body["unread"] == 2
        assert {row["reminderTitle"] for row in body["data"]} == {"Electricity", "Internet bill"}
        assert all(row["allocationName"] == "Electricity Bill" for row in body["data"])

    def test_mark_read_shows_on_next_read(self, client, auth_headers, delivered):
        inbox(client, auth_headers)
        target = delivered[0]

        response = client.put(f"/notification/{target.id}", headers=auth_headers)

        assert response.json() == {"status": True, "message": "Notification read successfully."}
        body = inbox(client, auth_headers)
        assert body["unread"] == 1
        statuses = {row["id"]: row["status"] for row in body["data"]}
        assert statuses[target.id] == "read"

    def test_delete_shows_on_next_read(self, client, auth_headers, delivered):
        inbox(client, auth_headers)

        response = client.delete(f"/notification/{delivered[0].id}", headers=auth_headers)

        assert response.json()["message"] == "Notification deleted successfully."
        assert inbox(client, auth_headers)["totalNotification"] == 1

    def test_bulk_read(self, client, auth_headers, delivered):
        inbox(client, auth_headers)

        response = client.post("/notification", json={"action": "read"}, headers=auth_headers)

        assert response.json() == {"status": True, "message": "All notifications marked as read."}
        body = inbox(client, auth_headers)
        assert body["unread"] == 0
        assert body["totalNotification"] == 2

    def test_bulk_delete(self, client, auth_headers, delivered, db):
        inbox(client, auth_headers)

        response = client.post("/notification", json={"action": "delete"}, headers=auth_headers)

        assert response.json() == {"status": True, "message": "All notifications deleted."}
        assert inbox(client, auth_headers)["totalNotification"] == 0
        db.expire_all()
        assert db.query(Notification).count() == 0

    def test_unknown_bulk_action_is_rejected(self, client, auth_headers, delivered):
        response = client.post("/notification", json={"action": "archive"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["status"] is False

    def test_other_users_notification_is_not_found(self, client, delivered, other_user):
        from fintrack.core.security import create_access_token

        headers = {"Authorization": f"Bearer {create_access_token(other_user.id)}"}

        response = client.put(f"/notification/{delivered[0].id}", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"status": False, "message": "Notification not found."}
        assert inbox(client, headers)["totalNotification"] == 0

    def test_new_delivery_shows_on_next_read(self, client, auth_headers, scheduler, job_queue, worker, user, allocation):
        assert inbox(client, auth_headers)["totalNotification"] == 0

        reminder, _ = scheduler.create(user.id, allocation.id, "Water bill", 50000, NOW + timedelta(hours=3))
        job_queue.fire(reminder.job_id, worker)

        body = inbox(client, auth_headers)
        assert body["totalNotification"] == 1
        assert body["data"][0]["reminderTitle"] == "Water bill"

    def test_bulk_actions_leave_other_owner_untouched(
        self, client, auth_headers, delivered, scheduler, job_queue, worker, other_user, db
    ):
        from fintrack.core.security import create_access_token

        theirs = make_allocation(db, other_user, name="Their Budget")
        reminder, _ = scheduler.create(other_user.id, theirs.id, "Rent due", 300000, NOW + timedelta(days=1))
        job_queue.fire(reminder.job_id, worker)
        other_headers = {"Authorization": f"Bearer {create_access_token(other_user.id)}"}
        assert inbox(client, other_headers)["unread"] == 1

        client.post("/notification", json={"action": "read"}, headers=auth_headers)
        client.post("/notification", json={"action": "delete"}, headers=auth_headers)

        assert inbox(client, auth_headers)["totalNotification"] == 0
        body = inbox(client, other_headers)
        assert body["totalNotification"] == 1
        assert body["unread"] == 1
        assert body["data"][0]["reminderTitle"] == "Rent due"

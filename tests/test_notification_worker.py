"""Tests for the job handler that turns a fired reminder into a notification."""

from datetime import timedelta

import pytest

from fintrack.core.errors import ReminderNotFound
from fintrack.core.security import room_id_for
from fintrack.models.notification import Notification
from fintrack.reminders.queue import job_id_for
from fintrack.reminders.worker import NotificationWorker
from fintrack.schemas.reminder import ReminderUpdate
from fintrack.services.cache import NOTIFICATIONS, cache_key
from fintrack.services.notifications import NotificationService

from tests.factories import NOW, FakeWebSocket, LoopbackPublisher, make_allocation


def schedule(scheduler, user, allocation, title="Internet bill"):
    reminder, _ = scheduler.create(user.id, allocation.id, title, 350000, NOW + timedelta(days=1))
    return reminder


class TestDeliver:
    def test_creates_unread_notification_and_publishes_to_owner_room(
        self, scheduler, job_queue, worker, publisher, db, user, allocation
    ):
        reminder = schedule(scheduler, user, allocation)

        notification = job_queue.fire(reminder.job_id, worker)

        assert notification.status == "unread"
        assert notification.owner_id == user.id
        assert notification.reminder_id == reminder.id
        assert db.query(Notification).count() == 1

        assert len(publisher.messages) == 1
        room_id, event, payload = publisher.messages[0]
        assert room_id == room_id_for(user.id)
        assert event == "newNotification"
        assert payload["id"] == notification.id
        assert payload["reminderTitle"] == "Internet bill"
        assert payload["allocationName"] == "Electricity Bill"
        assert payload["status"] == "unread"

    def test_missing_reminder_raises_so_job_is_retried(self, worker, publisher, db):
        with pytest.raises(ReminderNotFound):
            worker.deliver("does-not-exist", 1)

        assert db.query(Notification).count() == 0
        assert publisher.messages == []

    def test_deleted_reminder_never_produces_notification(
        self, scheduler, job_queue, worker, publisher, db, user, allocation
    ):
        reminder = schedule(scheduler, user, allocation)
        job_id = reminder.job_id
        scheduler.delete(reminder.id, user.id)

        assert job_id in job_queue.cancelled
        # a copy of the job that escaped revocation still fires
        with pytest.raises(ReminderNotFound):
            worker.deliver(reminder.id, 1, job_id=job_id)
        assert db.query(Notification).count() == 0
        assert publisher.messages == []

    def test_stale_job_after_reschedule_is_skipped(self, scheduler, job_queue, worker, publisher, db, user, allocation):
        reminder = schedule(scheduler, user, allocation)
        stale_job = reminder.job_id
        scheduler.update(reminder.id, user.id, ReminderUpdate(due_date=NOW + timedelta(days=2)))

        assert worker.deliver(reminder.id, 1, job_id=stale_job) is None
        assert db.query(Notification).count() == 0

        job_queue.fire(job_id_for(reminder.id, 2), worker)
        assert db.query(Notification).count() == 1
        assert len(publisher.messages) == 1

    def test_redelivered_job_reuses_notification(self, scheduler, worker, publisher, db, user, allocation):
        reminder = schedule(scheduler, user, allocation)

        first = worker.deliver(reminder.id, 1, job_id=reminder.job_id)
        second = worker.deliver(reminder.id, 1, job_id=reminder.job_id)

        assert first.id == second.id
        assert db.query(Notification).count() == 1

    def test_invalidates_cached_notification_list(self, scheduler, job_queue, worker, cache, redis_client, db, user, allocation):
        service = NotificationService(db, cache)
        assert service.list(user.id)["totalNotification"] == 0
        assert redis_client.get(cache_key(NOTIFICATIONS, user.id, "list", 1, 10)) is not None

        reminder = schedule(scheduler, user, allocation)
        job_queue.fire(reminder.job_id, worker)

        listing = service.list(user.id)
        assert listing["totalNotification"] == 1
        assert listing["unread"] == 1


class TestFanOut:
    def test_every_socket_in_owner_room_gets_exactly_one_event(
        self, scheduler, job_queue, cache, push_router, db, user, other_user, allocation
    ):
        phone, laptop, stranger = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
        push_router.register(phone, user.id)
        push_router.join(laptop, room_id_for(user.id))
        push_router.register(stranger, other_user.id)

        worker = NotificationWorker(db, cache, LoopbackPublisher(push_router))
        reminder = schedule(scheduler, user, allocation)
        job_queue.fire(reminder.job_id, worker)

        for socket in (phone, laptop):
            assert len(socket.sent) == 1
            assert socket.sent[0]["event"] == "newNotification"
            assert socket.sent[0]["data"]["reminderTitle"] == "Internet bill"
        assert stranger.sent == []

    def test_no_sockets_still_persists_notification(self, scheduler, job_queue, cache, push_router, db, user, allocation):
        worker = NotificationWorker(db, cache, LoopbackPublisher(push_router))
        reminder = schedule(scheduler, user, allocation)

        job_queue.fire(reminder.job_id, worker)

        assert db.query(Notification).count() == 1


class TestOrphans:
    def test_notification_outlives_its_reminder(self, scheduler, job_queue, worker, cache, db, user, allocation):
        reminder = schedule(scheduler, user, allocation)
        job_queue.fire(reminder.job_id, worker)

        scheduler.delete(reminder.id, user.id)

        listing = NotificationService(db, cache).list(user.id)
        assert listing["totalNotification"] == 1
        row = listing["data"][0]
        assert row["reminderId"] == reminder.id
        assert row["reminderTitle"] is None
        assert row["allocationName"] is None

    def test_deleted_allocation_renders_null_name(self, scheduler, job_queue, worker, cache, db, user):
        allocation = make_allocation(db, user, name="Phone Plan")
        reminder = schedule(scheduler, user, allocation)
        job_queue.fire(reminder.job_id, worker)
        db.delete(allocation)
        db.commit()

        row = NotificationService(db, cache).list(user.id)["data"][0]
        assert row["reminderTitle"] == "Internet bill"
        assert row["allocationName"] is None

"""Tests for the celery-backed reminder job queue."""

from unittest.mock import MagicMock

import pytest

from fintrack.core.errors import JobQueueError
from fintrack.reminders.queue import DELIVER_TASK, ReminderJobQueue, job_id_for


@pytest.fixture
def celery_app():
    return MagicMock()


class TestReminderJobQueue:
    def test_job_id_includes_version(self):
        assert job_id_for("r1", 3) == "reminder:r1:3"

    def test_enqueue_sends_delayed_task(self, celery_app):
        queue = ReminderJobQueue(celery_app, queue_name="reminders")

        job_id = queue.enqueue("r1", 2, 90.5)

        assert job_id == "reminder:r1:2"
        celery_app.send_task.assert_called_once_with(
            DELIVER_TASK,
            kwargs={"reminder_id": "r1", "version": 2},
            countdown=90.5,
            task_id="reminder:r1:2",
            queue="reminders",
        )

    def test_negative_delay_fires_immediately(self, celery_app):
        ReminderJobQueue(celery_app).enqueue("r1", 1, -5)
        assert celery_app.send_task.call_args.kwargs["countdown"] == 0

    def test_cancel_revokes(self, celery_app):
        ReminderJobQueue(celery_app).cancel("reminder:r1:1")
        celery_app.control.revoke.assert_called_once_with("reminder:r1:1")

    def test_broker_failures_are_wrapped(self, celery_app):
        celery_app.send_task.side_effect = ConnectionError("broker down")
        celery_app.control.revoke.side_effect = ConnectionError("broker down")
        queue = ReminderJobQueue(celery_app)

        with pytest.raises(JobQueueError):
            queue.enqueue("r1", 1, 10)
        with pytest.raises(JobQueueError):
            queue.cancel("reminder:r1:1")

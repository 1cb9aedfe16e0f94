"""Tests for the celery task wrapping the notification worker."""

from unittest.mock import MagicMock, patch

import pytest
from celery.exceptions import Retry
from prometheus_client import REGISTRY

from fintrack.core.errors import ReminderNotFound
from fintrack.reminders import tasks
from fintrack.reminders.config import settings as reminder_settings


def dropped_count():
    return REGISTRY.get_sample_value("notifications_dropped_total") or 0.0


@pytest.fixture
def task(monkeypatch):
    monkeypatch.setattr(tasks.DeliveryTask, "_services", MagicMock())
    # the decorator hands back a lazy proxy; patch the real task object
    yield tasks.deliver_reminder_task._get_current_object()


def run_attempt(task, retries):
    task.push_request(id="reminder:abc:1", retries=retries)
    try:
        return task.run(reminder_id="abc", version=1)
    finally:
        task.pop_request()


class TestDeliveryTask:
    def test_retry_policy_matches_settings(self, task):
        assert task.max_retries == reminder_settings.JOB_ATTEMPTS - 1
        assert task.default_retry_delay == reminder_settings.JOB_BACKOFF_SECONDS
        assert task.name == "reminders.deliver"

    def test_successful_attempt_returns_notification_id(self, task):
        with patch.object(tasks, "SessionLocal"), patch.object(tasks, "NotificationWorker") as worker_cls:
            worker_cls.return_value.deliver.return_value = MagicMock(id="n-1")
            assert run_attempt(task, retries=0) == "n-1"
            worker_cls.return_value.deliver.assert_called_once_with("abc", 1, job_id="reminder:abc:1")

    def test_failed_attempt_is_retried_with_fixed_backoff(self, task):
        with patch.object(tasks, "SessionLocal") as session_cls, \
                patch.object(tasks, "NotificationWorker") as worker_cls, \
                patch.object(task, "retry", side_effect=Retry()) as retry:
            worker_cls.return_value.deliver.side_effect = ReminderNotFound()

            with pytest.raises(Retry):
                run_attempt(task, retries=0)

            assert retry.call_args.kwargs["countdown"] == reminder_settings.JOB_BACKOFF_SECONDS
            session_cls.return_value.close.assert_called_once()

    def test_last_attempt_drops_job(self, task):
        before = dropped_count()
        with patch.object(tasks, "SessionLocal"), \
                patch.object(tasks, "NotificationWorker") as worker_cls, \
                patch.object(task, "retry") as retry:
            worker_cls.return_value.deliver.side_effect = ReminderNotFound()

            with pytest.raises(ReminderNotFound):
                run_attempt(task, retries=reminder_settings.JOB_ATTEMPTS - 1)

            retry.assert_not_called()
        assert dropped_count() == before + 1

    def test_stale_job_returns_none(self, task):
        with patch.object(tasks, "SessionLocal"), patch.object(tasks, "NotificationWorker") as worker_cls:
            worker_cls.return_value.deliver.return_value = None
            assert run_attempt(task, retries=0) is None

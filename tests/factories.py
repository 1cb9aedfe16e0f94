"""Test doubles and builders shared by the test modules."""

import asyncio
from datetime import datetime, timedelta

from fintrack import crud
from fintrack.core.errors import JobQueueError
from fintrack.reminders.queue import job_id_for
from fintrack.schemas.allocation import AllocationCreate
from fintrack.schemas.user import UserCreate
from fintrack.utils.server_time import SERVER_TZ, server_now

# Fixed server-time clock for scheduler tests
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=SERVER_TZ)


class FakeJobQueue:
    """In-memory stand-in for ReminderJobQueue.

    Refuses a second pending job for a reminder that still has one, so any
    test that reschedules without cancelling fails loudly.
    """

    def __init__(self):
        self.pending = {}
        self.enqueued = []
        self.cancelled = []
        self.fail_enqueue = False
        self.fail_cancel = False

    def enqueue(self, reminder_id, version, delay_seconds):
        if self.fail_enqueue:
            raise JobQueueError()
        for job in self.pending.values():
            if job["reminder_id"] == reminder_id:
                raise AssertionError(f"reminder {reminder_id} already has a pending job")
        job_id = job_id_for(reminder_id, version)
        job = {"job_id": job_id, "reminder_id": reminder_id, "version": version, "delay": delay_seconds}
        self.pending[job_id] = job
        self.enqueued.append(job)
        return job_id

    def cancel(self, job_id):
        if self.fail_cancel:
            raise JobQueueError()
        self.pending.pop(job_id, None)
        self.cancelled.append(job_id)

    def jobs_for(self, reminder_id):
        return [job for job in self.pending.values() if job["reminder_id"] == reminder_id]

    def fire(self, job_id, worker):
        job = self.pending.pop(job_id)
        return worker.deliver(job["reminder_id"], job["version"], job_id=job_id)


class RecordingPublisher:
    def __init__(self):
        self.messages = []
        self.closed = False

    def publish(self, room_id, event, payload):
        self.messages.append((room_id, event, payload))
        return 1

    def close(self):
        self.closed = True


class LoopbackPublisher:
    """Publishes straight into a local room router, as the relay would."""

    def __init__(self, router):
        self.router = router

    def publish(self, room_id, event, payload):
        return asyncio.run(self.router.publish(room_id, event, payload))


class FakeWebSocket:
    def __init__(self, broken=False):
        self.accepted = False
        self.sent = []
        self.broken = broken

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def make_user(db, email="ana@example.com", name="Ana Putri"):
    return crud.user.create(db, obj_in=UserCreate(name=name, email=email, password="secret123"))


def make_allocation(db, owner, name="Electricity Bill", budget=500000, type="expense"):
    return crud.allocation.create(
        db, owner_id=owner.id, obj_in=AllocationCreate(name=name, budget=budget, type=type)
    )


def in_days(days, base=None):
    return (base or server_now()) + timedelta(days=days)

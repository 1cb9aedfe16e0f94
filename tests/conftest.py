# tests/conftest.py
"""Shared fixtures.

Every test gets a fresh in-memory database, a fakeredis-backed cache and an
in-memory job queue standing in for celery, so the reminder pipeline can be
driven end to end without a broker.
"""

import fakeredis
import pytest
from fastapi.testclient import TestClient

from fintrack.core.security import create_access_token
from fintrack.core.services import AppServices
from fintrack.db.base import Base
from fintrack.db.session import SessionLocal, engine
from fintrack.push.rooms import PushChannelRouter
from fintrack.reminders.scheduler import ReminderScheduler
from fintrack.reminders.worker import NotificationWorker
from fintrack.services.cache import ResponseCache

from tests.factories import NOW, FakeJobQueue, RecordingPublisher, make_allocation, make_user


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def cache(redis_client):
    return ResponseCache(redis_client)


@pytest.fixture
def job_queue():
    return FakeJobQueue()


@pytest.fixture
def push_router():
    return PushChannelRouter()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def scheduler(db, job_queue, cache):
    return ReminderScheduler(db, job_queue, cache, clock=lambda: NOW)


@pytest.fixture
def worker(db, cache, publisher):
    return NotificationWorker(db, cache, publisher)


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def other_user(db):
    return make_user(db, email="budi@example.com", name="Budi Santoso")


@pytest.fixture
def allocation(db, user):
    return make_allocation(db, user)


@pytest.fixture
def services(cache, job_queue, push_router):
    return AppServices(cache=cache, job_queue=job_queue, push_router=push_router)


@pytest.fixture
def app(services):
    from fintrack.main import create_application

    return create_application(services=services)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}

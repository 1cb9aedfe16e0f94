"""Root pytest configuration."""

import os

# Settings are read at import time, so the test environment must be in place
# before anything from fintrack is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["METRICS_ENABLED"] = "false"
os.environ["PUSH_RELAY_ENABLED"] = "false"
os.environ["LOG_FILE"] = ""
os.environ["REMINDER_CELERY_BROKER_URL"] = "memory://"

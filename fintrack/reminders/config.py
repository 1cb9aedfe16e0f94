from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class ReminderSettings(BaseSettings):
    # Celery configuration
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: Optional[str] = None
    WORKER_CONCURRENCY: int = 4
    QUEUE_NAME: str = "reminders"

    # Delivery retry policy: total attempts and fixed backoff between them
    JOB_ATTEMPTS: int = 3
    JOB_BACKOFF_SECONDS: int = 5

    model_config = SettingsConfigDict(env_prefix="REMINDER_", env_file=".env", extra="ignore")


settings = ReminderSettings()

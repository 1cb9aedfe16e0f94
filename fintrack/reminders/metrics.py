from prometheus_client import Counter


reminders_scheduled_total = Counter(
    "reminders_scheduled_total",
    "Total delivery jobs enqueued for reminders",
)

reminders_cancelled_total = Counter(
    "reminders_cancelled_total",
    "Total delivery jobs revoked on reschedule or delete",
)

notifications_delivered_total = Counter(
    "notifications_delivered_total",
    "Total notifications created by fired reminders",
)

notifications_stale_total = Counter(
    "notifications_stale_total",
    "Total fired jobs skipped because the reminder was rescheduled",
)

notifications_dropped_total = Counter(
    "notifications_dropped_total",
    "Total delivery jobs dropped after exhausting retries",
)

"""
Application error hierarchy.

Services raise these; the API layer turns them into ``{"status": false,
"message": ...}`` responses with the carried status code.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str = None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request."


class ConflictError(AppError):
    # conflicts are reported as bad requests to clients
    status_code = 400
    default_message = "Conflict."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found."


class InternalError(AppError):
    status_code = 500


class ReminderNotFound(NotFoundError):
    default_message = "Reminder not found."


class JobQueueError(InternalError):
    pass


class CacheError(InternalError):
    pass

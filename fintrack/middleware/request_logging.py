"""
Request logging middleware

Logs method, path, query, status and duration of every HTTP request except
the auth routes, whose bodies and tokens must stay out of the log.
"""

import time
import logging
from fastapi import Request

logger = logging.getLogger("fintrack.requests")


class RequestLoggingMiddleware:
    def __init__(self, app, skip_prefixes=("/auth",)):
        self.app = app
        self.skip_prefixes = tuple(skip_prefixes)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        if request.url.path.startswith(self.skip_prefixes):
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.time() - start_time) * 1000
            query = f"?{request.url.query}" if request.url.query else ""
            logger.info(f"{request.method} {request.url.path}{query} {status_code} {duration_ms:.1f}ms")

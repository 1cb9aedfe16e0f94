from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
import logging
import sys

from fintrack.core.config import settings
from fintrack.core.errors import AppError
from fintrack.core.services import AppServices
from fintrack.middleware.request_logging import RequestLoggingMiddleware
from fintrack.api.v1.api import api_router

# Configure logging
handlers = [logging.StreamHandler(sys.stdout)]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=handlers,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.PROJECT_NAME} ({settings.ENVIRONMENT.value})...")
    services: AppServices = app.state.services
    await services.init()
    try:
        yield
    finally:
        logger.info("Shutting down...")
        await services.shutdown()


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    error = errors[0]
    fields = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    return f"{'.'.join(fields)}: {message}" if fields else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!r}", exc_info=exc.__cause__)
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": False, "message": exc.message, **exc.extra},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"status": False, "message": _first_validation_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"status": False, "message": "Internal server error."},
        )


def create_application(services: Optional[AppServices] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.services = services or AppServices.from_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    if settings.METRICS_ENABLED:
        from prometheus_client import make_asgi_app
        app.mount("/metrics", make_asgi_app())

    return app


app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "fintrack.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT.value == "development",
    )

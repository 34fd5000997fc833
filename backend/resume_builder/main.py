"""
FastAPI application entry point for the resume builder.

Creates the application with its middleware, routes, exception handlers and
lifecycle events.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_builder.api import API_DESCRIPTION, API_TITLE, API_VERSION
from resume_builder.api.deps import limiter
from resume_builder.api.v1 import api_router
from resume_builder.core.config import get_settings
from resume_builder.core.database import check_db_health, close_db, init_db
from resume_builder.core.exceptions import ServiceError
from resume_builder.core.logging import (
    clear_request_context,
    log_shutdown_info,
    log_startup_info,
    performance_logger,
    set_request_context,
    setup_logging,
)

settings = get_settings()
logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager: logging and database setup, then cleanup.
    """
    setup_logging()
    log_startup_info()

    try:
        await init_db()
        logger.info("Application startup completed successfully")
        yield
    except Exception as e:
        logger.error(f"Startup failed: {str(e)}", exc_info=True)
        raise
    finally:
        try:
            await close_db()
        except Exception as e:
            logger.error(f"Shutdown error: {str(e)}", exc_info=True)
        log_shutdown_info()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
    debug=settings.debug,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line with a request id and time the request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    set_request_context(request_id)
    start_time = time.time()
    try:
        response = await call_next(request)
        performance_logger.log_request_time(
            request.method, request.url.path, time.time() - start_time, response.status_code
        )
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_request_context()


app.include_router(api_router, prefix=settings.api_v1_str)


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures as 400 VALIDATION_ERROR."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    message = errors[0]["message"] if errors else "Request validation failed"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "error",
            "code": "VALIDATION_ERROR",
            "message": message,
            "details": {"errors": errors},
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "code": _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
            "message": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Anything uncaught becomes a 500 SERVER_ERROR envelope."""
    logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "code": "SERVER_ERROR",
            "message": str(exc) if settings.debug else "An internal server error occurred",
        },
    )


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Liveness plus database status; AI availability is reported without calling the model.
    """
    database = await check_db_health()
    healthy = database.get("status") == "healthy"
    return {
        "status": "healthy" if healthy else "degraded",
        "version": API_VERSION,
        "environment": settings.environment,
        "services": {
            "database": database,
            "api": "healthy",
            "ai": "configured" if settings.gemini_api_key else "missing_api_key",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "resume_builder.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )

"""
Logging for the Resume Builder API.

One stdout handler (JSON in production, coloured lines elsewhere) and an
optional rotating JSON file. Records are tagged with the request id and the
authenticated user id held in context variables, which the request
middleware and the auth dependency set.

Two event loggers sit on top: ``performance_logger`` times requests and every
generative AI call, ``security_logger`` records login and access decisions.
"""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from resume_builder.core.config import get_settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)

# LogRecord attributes that are not caller-supplied ``extra`` fields
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id", "user_id"}

# Third-party loggers and the level they are held at
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "httpx": logging.WARNING,
    "asyncio": logging.WARNING,
    "google": logging.WARNING,
    "urllib3": logging.WARNING,
}


def _context() -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    if request_id_var.get():
        context["request_id"] = request_id_var.get()
    if user_id_var.get():
        context["user_id"] = user_id_var.get()
    return context


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with request context and ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            **_context(),
        }
        entry.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Single-line coloured output for local development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{timestamp} {record.levelname:8s}{self.RESET} {record.name}: {record.getMessage()}"

        request_id = request_id_var.get()
        if request_id:
            line += f" [{request_id[:8]}]"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class RequestFilter(logging.Filter):
    """Copy the request context onto each record for non-JSON handlers."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context().items():
            setattr(record, key, value)
        return True


class PerformanceLogger:
    """Timings for HTTP requests and generative AI calls."""

    def __init__(self, logger_name: str = "performance"):
        self.logger = logging.getLogger(logger_name)

    def log_request_time(self, method: str, path: str, duration: float, status_code: int):
        self.logger.info(
            f"{method} {path} -> {status_code} in {duration:.3f}s",
            extra={"event_type": "request", "duration": duration, "status_code": status_code},
        )

    def log_ai_call(
        self,
        task_name: str,
        model: str,
        duration: float,
        config_source: Optional[str] = None,
        error: Optional[str] = None,
    ):
        """
        Record one call to the generative AI service.

        Args:
            config_source: ``"stored"`` or ``"default"``, where the task's settings came from
            error: Failure message; None means the call succeeded
        """
        self.logger.log(
            logging.INFO if error is None else logging.WARNING,
            f"AI task '{task_name}' on {model} {'failed' if error else 'completed'} in {duration:.2f}s",
            extra={
                "event_type": "ai_call",
                "task_name": task_name,
                "model": model,
                "config_source": config_source,
                "duration": duration,
                "success": error is None,
                "error": error,
            },
        )


class SecurityLogger:
    """Authentication and authorization events."""

    def __init__(self, logger_name: str = "security"):
        self.logger = logging.getLogger(logger_name)

    def log_login_attempt(self, email: str, success: bool, ip_address: Optional[str]):
        self.logger.log(
            logging.INFO if success else logging.WARNING,
            "Login successful" if success else "Login failed",
            extra={"event_type": "login_attempt", "email": email, "ip_address": ip_address},
        )

    def log_permission_denied(self, user_id: int, required_role: str):
        self.logger.warning(
            f"User {user_id} lacks the {required_role} role",
            extra={"event_type": "permission_denied", "required_role": required_role},
        )


def setup_logging() -> None:
    """Install handlers on the root logger according to the settings."""
    settings = get_settings()
    level = getattr(logging, settings.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter() if settings.is_production else ColoredConsoleFormatter())
    handlers = [console_handler]

    if settings.log_file:
        try:
            Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(StructuredFormatter())
            handlers.append(file_handler)
        except OSError as e:
            logging.error(f"Failed to set up file logging: {e}")

    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(RequestFilter())
        root_logger.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING if settings.is_production else logging.INFO)

    logging.getLogger(__name__).info(f"Logging initialized at {settings.log_level}")


def set_request_context(request_id: str) -> None:
    request_id_var.set(request_id)
    user_id_var.set(None)


def clear_request_context() -> None:
    request_id_var.set(None)
    user_id_var.set(None)


performance_logger = PerformanceLogger()
security_logger = SecurityLogger()


def log_startup_info():
    settings = get_settings()
    logging.getLogger("startup").info(
        f"{settings.app_name} {settings.app_version} starting ({settings.environment})",
        extra={"debug": settings.debug, "ai_configured": bool(settings.gemini_api_key)},
    )


def log_shutdown_info():
    settings = get_settings()
    logging.getLogger("shutdown").info(f"{settings.app_name} shutting down")

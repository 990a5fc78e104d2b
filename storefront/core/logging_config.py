"""
Structured logging configuration

Every record is emitted as a single JSON document carrying the service
identity, the request trace context (request id, correlation id, acting
user) and, when present, exception details and custom fields passed through
``extra={'extra_fields': {...}}``.
"""

import logging
import logging.handlers
import sys
import json
import re
import time
import traceback
from datetime import datetime
from typing import Any, Dict, Optional
from contextvars import ContextVar
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

class StructuredFormatter(logging.Formatter):
    """JSON formatter compatible with ELK, CloudWatch Insights and Datadog."""

    def __init__(self, service: str, environment: str, version: str):
        super().__init__()
        self.service = service
        self.environment = environment
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "environment": self.environment,
            "version": self.version,
        }

        trace_context = get_trace_context()
        if trace_context:
            log_obj["trace"] = trace_context

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
            "module": record.module
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {
                "duration_ms": record.duration_ms
            }

        return json.dumps(log_obj, default=str)

class PerformanceFilter(logging.Filter):
    """Lift ``duration`` (seconds) into ``duration_ms``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(record, 'duration'):
            record.duration_ms = record.duration * 1000
        return True

class SecurityFilter(logging.Filter):
    """Redact values following sensitive keys, e.g. ``password=hunter2``."""

    SENSITIVE_FIELDS = (
        'password', 'token', 'api_key', 'secret',
        'authorization', 'cookie', 'session'
    )
    _pattern = re.compile(
        r"(?i)\b(" + "|".join(SENSITIVE_FIELDS) + r")\b(\s*[=:]\s*)(\S+)"
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._pattern.sub(r"\1\2***REDACTED***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True

def setup_logging(
    service_name: str,
    level: str = "INFO",
    environment: str = "development",
    version: str = "1.0.0",
    enable_console: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Setup structured logging for the service

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Deployment environment (development/staging/production)
        version: Service version
        enable_console: Enable stdout output
        log_file: Path to a rotating log file, if any
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = []

    formatter = StructuredFormatter(service_name, environment, version)

    handlers = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(PerformanceFilter())
        handler.addFilter(SecurityFilter())
        root_logger.addHandler(handler)

    # Third-party loggers
    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('fastapi').setLevel(logging.INFO)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={
            'extra_fields': {
                'service': service_name,
                'level': level,
                'handlers': {
                    'console': enable_console,
                    'file': bool(log_file)
                }
            }
        }
    )

class LoggerAdapter(logging.LoggerAdapter):
    """Injects the current trace context into ``extra`` of every call."""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get('extra') or {})
        extra.update(get_trace_context() or {})
        kwargs['extra'] = extra
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    """
    Get a logger instance with request context support

    Args:
        name: Logger name (usually __name__)
    """
    return LoggerAdapter(logging.getLogger(name), {})

def get_trace_context() -> Optional[Dict[str, Any]]:
    context = {}
    request_id = request_id_var.get()
    if request_id:
        context["request_id"] = request_id
    correlation_id = correlation_id_var.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    user_id = user_id_var.get()
    if user_id:
        context["user_id"] = user_id
    return context or None

def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None
) -> None:
    if request_id:
        request_id_var.set(request_id)
    if correlation_id:
        correlation_id_var.set(correlation_id)
    if user_id:
        user_id_var.set(user_id)

def clear_request_context() -> None:
    request_id_var.set(None)
    correlation_id_var.set(None)
    user_id_var.set(None)

def generate_request_id() -> str:
    return str(uuid.uuid4())

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and its outcome, tracks duration and echoes the
    request id back in ``X-Request-ID``.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        correlation_id = request.headers.get('X-Correlation-ID')

        clear_request_context()
        set_request_context(
            request_id=request_id,
            correlation_id=correlation_id
        )

        logger = get_logger(__name__)
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'client_host': request.client.host if request.client else None
                }
            }
        )

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    'extra_fields': {
                        'method': request.method,
                        'path': request.url.path,
                    },
                    'duration': time.time() - start_time,
                }
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'status_code': response.status_code,
                },
                'duration': time.time() - start_time,
            }
        )
        response.headers['X-Request-ID'] = request_id
        return response

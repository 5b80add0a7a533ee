"""
Structured Logging Configuration with Correlation IDs

Provides centralized logging for the quote proxy and the chart view.
Features:
- Correlation ID tracking across a request (X-Correlation-ID header)
- JSON format: {timestamp, correlation_id, service, level, message, extra}
- Colored console format for development
- log_api_call() for upstream calls with method, endpoint, status_code, response_time
"""
import logging
import json
import uuid
from datetime import datetime, timezone
from typing import Optional, Any, Callable
from contextvars import ContextVar

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current context, creating one if needed.
    """
    cid = _correlation_id.get()
    if cid is None:
        cid = set_correlation_id()
    return cid


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set (or generate) the correlation ID for the current context and return it."""
    cid = correlation_id or uuid.uuid4().hex
    _correlation_id.set(cid)
    return cid


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def _service_name(record: logging.LogRecord) -> str:
    return record.name.rsplit(".", 1)[-1]


def _record_extra(record: logging.LogRecord) -> dict:
    extra = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        try:
            json.dumps(value)
            extra[key] = value
        except (TypeError, ValueError):
            extra[key] = str(value)
    return extra


class StructuredFormatter(logging.Formatter):
    """
    Formatter that emits one JSON object per record.

    Example:
    {
        "timestamp": "2026-10-19T14:30:00.123456+00:00",
        "correlation_id": "3f2a...",
        "service": "alpha_vantage",
        "level": "INFO",
        "message": "API CALL: GET https://www.alphavantage.co/query?function=TIME_SERIES_DAILY&symbol=AAPL (212ms) -> 200",
        "extra": {"status_code": 200, ...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "correlation_id": get_correlation_id(),
            "service": _service_name(record),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = _record_extra(record)
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter for development.
    Format: [correlation_id] LEVEL service - message
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        short_cid = get_correlation_id()[:8]
        color = self.COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""

        formatted = (
            f"[{short_cid}] "
            f"{color}{record.levelname:8}{reset} "
            f"{_service_name(record):20} - "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def _make_handler(use_json: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter() if use_json else ConsoleFormatter())
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Records propagate to the root handler installed by setup_logging(), so
    the output format is decided once for the whole application.
    """
    return logging.getLogger(name)


def log_api_call(
    logger: logging.Logger,
    method: str,
    endpoint: str,
    status_code: Optional[int] = None,
    response_time_ms: Optional[float] = None,
    error: Optional[str] = None,
    **extra: Any
) -> None:
    """
    Log an outbound API call with standardized fields.

    Args:
        logger: Logger instance to use
        method: HTTP method (GET, POST, etc.)
        endpoint: API endpoint URL (never include credentials)
        status_code: HTTP response status code
        response_time_ms: Response time in milliseconds
        error: Error message if the call failed
        **extra: Additional context to log
    """
    log_data = {"api_method": method, "api_endpoint": endpoint}
    if status_code is not None:
        log_data["status_code"] = status_code
    if response_time_ms is not None:
        log_data["response_time_ms"] = round(response_time_ms, 2)
    if error:
        log_data["error"] = error
    log_data.update(extra)

    if error or (status_code and status_code >= 400):
        level, message = logging.ERROR, f"API ERROR: {method} {endpoint}"
    else:
        level, message = logging.INFO, f"API CALL: {method} {endpoint}"

    if response_time_ms is not None:
        message += f" ({response_time_ms:.0f}ms)"
    if status_code is not None:
        message += f" -> {status_code}"

    logger.log(level, message, extra=log_data)


class CorrelationIdMiddleware:
    """
    ASGI middleware that sets a correlation ID for each HTTP request.

    Reuses the X-Correlation-ID request header when present and echoes the
    ID back on the response.

    Usage in FastAPI:
        app.add_middleware(CorrelationIdMiddleware)
    """

    def __init__(self, app: Any):
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        cid = set_correlation_id(headers.get(b"x-correlation-id", b"").decode() or None)

        async def send_with_correlation_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((b"x-correlation-id", cid.encode()))
                message["headers"] = response_headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            clear_correlation_id()


def setup_logging(use_json: bool = False, level: int = logging.INFO) -> None:
    """
    Configure the root logger for the entire application.

    Args:
        use_json: If True, use JSON structured output
        level: Root logging level
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_make_handler(use_json, level))

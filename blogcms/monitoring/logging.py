"""
Structured logging with secret redaction.

structlog renders pretty console output in development and JSON lines
everywhere else. Every entry is stamped in UTC+5 and carries the request id
bound by the logging middleware.

Security
--------
Authorization headers, cookies, bearer tokens, JWTs, PEM private keys and
email addresses are redacted before rendering.

Examples
--------
>>> from blogcms.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("cache invalidated", tag="posts")
"""

from logging import INFO, Filter, LogRecord, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    merge_contextvars,
)
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from blogcms.configs.settings import settings
from blogcms.utils.timezone import to_pkt_iso

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "proxy-authorization",
    },
)

# More specific patterns first: a JWT contains dots an email pattern could eat
SECRET_PATTERNS: list[tuple[Pattern, str]] = [
    (
        re_compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----[\s\S]*?-----END [A-Z ]*PRIVATE KEY-----"),
        "[REDACTED_KEY]",
    ),
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"(?i)bearer\s+[a-z0-9._~+/-]+=*"), "Bearer [REDACTED]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
]

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape control characters to prevent log injection.

    Examples
    --------
    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """Return headers with sensitive values redacted."""
    return {k: "[REDACTED]" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_secrets(message: str) -> str:
    """
    Redact credentials and addresses from a log message.

    Examples
    --------
    >>> redact_secrets("admin user@example.com logged in")
    'admin [REDACTED_EMAIL] logged in'
    """
    for pattern, replacement in SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp the entry with the current UTC+5 time."""
    event_dict["timestamp"] = to_pkt_iso()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """
    Sanitize every string value of the event dictionary.

    Redaction runs before control characters are escaped so that multi-line
    PEM blocks are still recognised.
    """
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = sanitize_log_message(redact_secrets(value))
        elif key.lower() == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)
    return event_dict


def get_processors(*, colors: bool = True) -> list[Processor]:
    """
    Get the list of structlog processors based on environment.

    Args:
        colors: Whether to enable colors in ConsoleRenderer.

    Returns:
        List of processors, renderer last.
    """
    processors: list[Processor] = [
        filter_by_level,
        merge_contextvars,
        add_log_level,
        add_timestamp,
        sanitize_event_dict,
        ExtraAdder(),
    ]

    if settings.ENVIRONMENT == "development":
        processors.append(
            ConsoleRenderer(
                colors=colors,
                pad_level=False,
                exception_formatter=RichTracebackFormatter(),
            ),
        )
    else:
        processors.append(JSONRenderer())

    return processors


def configure_logging() -> None:
    """Configure structured logging for the application."""
    # Hot reload re-runs this, so start from a clean root
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            sanitize_event_dict,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler = StreamHandler()
    console_handler.setFormatter(_formatter(colors=True))
    root.addHandler(console_handler)
    configure_file_logging()


def configure_file_logging() -> None:
    """Attach the rotating file handler when file logging is enabled."""
    if not settings.LOG_TO_FILE:
        return
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    file_handler.setLevel(INFO)
    file_handler.setFormatter(_formatter(colors=False))
    root.addHandler(file_handler)


def _formatter(*, colors: bool) -> ProcessorFormatter:
    return ProcessorFormatter(
        processor=get_processors(colors=colors)[-1],
        foreign_pre_chain=[add_log_level, add_timestamp, merge_contextvars],
    )


def get_logger(name: str) -> BoundLogger:
    """
    Get a structured logger instance.

    Examples
    --------
    >>> logger = get_logger("blogcms.services.post_service")
    >>> logger.info("post created", post_id=3)
    """
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Bind request ID to the current logging context."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()


class RequestIdFilter(Filter):
    """Inject the bound request id into stdlib log records."""

    def filter(self, record: LogRecord) -> bool:
        record.request_id = get_contextvars().get("request_id", "N/A")
        return True

"""
Observability helpers for BlogCMS.

Usage
-----
>>> from blogcms.monitoring import configure_logging, get_logger
>>> configure_logging()
>>> get_logger(__name__).info("started")
"""

from blogcms.monitoring.logging import (
    RequestIdFilter,
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    redact_secrets,
    sanitize_headers,
    sanitize_log_message,
)

__all__ = [
    "RequestIdFilter",
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_secrets",
    "sanitize_headers",
    "sanitize_log_message",
]

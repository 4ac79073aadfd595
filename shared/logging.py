"""
Structured JSON logging for the Matcher gateway.

Every line carries the ``service`` it was emitted by, whatever the logger
name, plus the ``request_id`` and ``user_id`` bound for the current request.
"""

import logging
import sys
import uuid
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

CORRELATION_KEYS = ("request_id", "user_id")


def service_name_processor(service_name: str) -> Processor:
    """Processor stamping ``service_name`` on every event."""

    def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            service_name_processor(service_name),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request ID (generated when absent) to the current context."""
    request_id = request_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def set_user_context(user_id: Optional[str] = None):
    if user_id:
        structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_context():
    structlog.contextvars.unbind_contextvars(*CORRELATION_KEYS)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)

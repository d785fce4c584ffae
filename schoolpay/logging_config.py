"""
Logging setup for the payment service.

Production gets one JSON object per line so order and webhook events can
be searched by order id. Other environments get plain text.
"""

import sys
import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from schoolpay.config import Settings, get_settings

# Passed by the payment code through ``extra=``
CONTEXT_FIELDS = ("order_id", "custom_order_id", "school_id", "event_type")

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def log_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Payment context attached to a record, skipping unset fields."""
    context = {}
    for field in CONTEXT_FIELDS:
        value = getattr(record, field, None)
        if value is not None:
            context[field] = value
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with any payment context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_obj.update(log_context(record))

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # UUIDs and Decimals
        return json.dumps(log_obj, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain text with a trailing ``[key=value ...]`` block when context is set."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = log_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} [{pairs}]"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Install a single stdout handler on the root logger."""
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if settings.is_production else logging.DEBUG)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.is_production:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ContextTextFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

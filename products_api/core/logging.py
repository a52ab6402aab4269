from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(requestId)s] - %(message)s"

# Set by RequestIdMiddleware for the lifetime of one request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIdFilter(logging.Filter):
    """
    Give every record a ``requestId`` attribute so LOG_FORMAT can print it.

    An explicit ``extra={"requestId": ...}`` wins; otherwise the id of the
    request being served is used, or "-" outside of a request.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "requestId", None):
            record.requestId = request_id_var.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install one stdout handler on the root logger, unless one is already there."""
    root = logging.getLogger()
    if root.handlers:
        # reloads, pytest's capture handler
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "products_api")

from __future__ import annotations

from contextvars import ContextVar, Token
import logging
from typing import Optional

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: Optional[str]) -> Token[str]:
    return _request_id_var.set(request_id or "")


def reset_request_id(token: Token[str]) -> None:
    _request_id_var.reset(token)


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    value = _request_id_var.get()
    return value if value else default


class RequestIdFilter(logging.Filter):
    """Stamp every record with the current request id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id("no-request")
        return True


def attach_request_id_filter(logger: Optional[logging.Logger] = None) -> None:
    target = logger or logging.getLogger()
    for handler in target.handlers:
        handler.addFilter(RequestIdFilter())

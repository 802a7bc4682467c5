from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
        line = (
            f"{ts} level={record.levelname} logger={record.name} "
            f"request_id={getattr(record, 'request_id', '-')} msg={record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # replace handlers so a reloaded app does not log twice
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(KeyValueFormatter())
    root.addHandler(handler)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_request_id() -> str:
    return request_id_var.get()

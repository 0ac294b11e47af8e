"""
Module: stock_kernel.logging_config
Responsibility: One-line JSON logging for every ledger operation.
Architecture position: Kernel.  Imported by every layer through
    ``get_logger``; imports only ``stock_kernel.exceptions``.

Record layout:
    ts, level, logger, message          -- always present
    correlation_id, actor_id,
    operation, entity_id                -- whatever the caller bound
    <extra keys>                        -- the ``extra=`` of the call
    exc_type, exc_message, traceback    -- when ``exc_info`` is attached
    error_code, error_<attribute>       -- when that exception is a
                                           ``StockKernelError``

Invariants enforced:
    - Context is held in a single ContextVar, so nested ``bind()`` blocks
      (gateway -> service -> store) restore exactly what they replaced.
    - Only the four context fields above can be bound.
    - UUID, Decimal, date and enum values serialize to strings, never floats.
"""

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from stock_kernel.exceptions import StockKernelError

_NAMESPACE = "stock_kernel"

_NO_CONTEXT: Mapping[str, str] = MappingProxyType({})


class LogContext:
    """Request-scoped fields stamped on every record of one gateway call."""

    FIELDS = ("correlation_id", "actor_id", "operation", "entity_id")

    _current: ContextVar[Mapping[str, str]] = ContextVar(
        "stock_log_context", default=_NO_CONTEXT,
    )

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(cls._current.get())

    @classmethod
    def clear(cls) -> None:
        cls._current.set(_NO_CONTEXT)

    @classmethod
    @contextmanager
    def bind(cls, **fields: object) -> Iterator[None]:
        """
        Layer ``fields`` over the current context for the ``with`` block.

        ``None`` values leave the outer value in place.  Non-string values
        (UUIDs) are stored as strings.
        """
        unknown = sorted(set(fields) - set(cls.FIELDS))
        if unknown:
            raise ValueError(f"Unknown log context field(s): {', '.join(unknown)}")
        layered = dict(cls._current.get())
        layered.update({k: str(v) for k, v in fields.items() if v is not None})
        token = cls._current.set(MappingProxyType(layered))
        try:
            yield
        finally:
            cls._current.reset(token)


# Attributes every LogRecord carries; anything else came from ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(str(v) for v in value)
    return str(value)


def _error_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if isinstance(exc, StockKernelError):
        fields["error_code"] = exc.code
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"error_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object (see the module docstring)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_error_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_jsonable)


def get_logger(name: str) -> logging.Logger:
    """``get_logger("modules.orders.service")`` -> ``stock_kernel.modules.orders.service``."""
    return logging.getLogger(f"{_NAMESPACE}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``stock_kernel`` logger.

    ``level`` may be a level name (``"DEBUG"``) as read from configuration.
    Only the first call has an effect until ``reset_logging()``.
    """
    global _configured
    if isinstance(level, str):
        try:
            level = logging.getLevelNamesMapping()[level.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {level!r}") from None

    with _lock:
        if _configured:
            return
        target = handler or logging.StreamHandler(stream or sys.stderr)
        target.setFormatter(StructuredFormatter())
        namespace = logging.getLogger(_NAMESPACE)
        namespace.setLevel(level)
        namespace.propagate = False
        namespace.addHandler(target)
        _configured = True


def reset_logging() -> None:
    """Detach handlers so the next ``configure_logging()`` applies.  Tests only."""
    global _configured
    with _lock:
        namespace = logging.getLogger(_NAMESPACE)
        for attached in list(namespace.handlers):
            namespace.removeHandler(attached)
        namespace.setLevel(logging.WARNING)
        _configured = False

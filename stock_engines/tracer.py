"""
stock_engines.tracer -- ``@traced_engine``: one STOCK_ENGINE_TRACE record per
engine call.

Each record carries:
    engine_name, engine_version
    input_fingerprint   16 hex chars of SHA-256 over the selected keyword
                        arguments, rendered as canonical JSON
    outcome             "ok", or "error" when the engine raised
    output_count        len() of the result when it is a collection
                        (units exploded, installments scheduled, ...)
    error_code          the ``StockKernelError`` code on failure
    duration_ms

Engines stay pure: the decorator only logs and never alters arguments,
results or exceptions.

Usage:
    @traced_engine("explosion", "1.0", fingerprint_fields=("stock_entry_id", "entry_date"))
    def explode(*, stock_entry_id, entry_date, lines, ...):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import json
import time
from collections.abc import Callable, Collection, Mapping
from typing import Any

from stock_kernel.exceptions import StockKernelError
from stock_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_MESSAGE = "STOCK_ENGINE_TRACE"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """Fingerprint of ``kwargs`` restricted to ``fingerprint_fields``.

    Absent fields count as ``None``; keys are sorted, and values the JSON
    encoder does not know (UUID, Decimal, date) are rendered with ``str``.
    """
    selected = {field: kwargs.get(field) for field in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def _output_count(result: Any) -> int | None:
    if isinstance(result, Collection) and not isinstance(result, (str, bytes)):
        return len(result)
    return None


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Wrap a pure engine function with trace logging."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            trace: dict[str, Any] = {
                "trace_type": TRACE_MESSAGE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": (
                    compute_input_fingerprint(fingerprint_fields, kwargs)
                    if fingerprint_fields else ""
                ),
                "outcome": "error",
            }
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except StockKernelError as exc:
                trace["error_code"] = exc.code
                raise
            else:
                trace.update(outcome="ok", output_count=_output_count(result))
                return result
            finally:
                trace["duration_ms"] = round((time.perf_counter() - started) * 1000, 3)
                _logger.info(TRACE_MESSAGE, extra=trace)

        return wrapper

    return decorator

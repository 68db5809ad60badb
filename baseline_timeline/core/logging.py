# baseline_timeline/core/logging.py
from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars

_logger: structlog.BoundLogger | None = None


def _add_service(service_name: str):
    def _inner(_: Any, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict
    return _inner


def build_processors(service_name: str) -> List[Any]:
    """
    JSON lines on stderr: ts, level, service, plus whatever run_scope() or the
    API middleware bound (run_id / request_id).
    """
    return [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        structlog.processors.add_log_level,
        _add_service(service_name),
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(service_name: str = "api", *, level: int | str = logging.INFO) -> None:
    global _logger

    numeric_level = resolve_level(level)
    # uvicorn/httpx stdlib loggers go to the same stream
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr, force=True)

    structlog.configure(
        processors=build_processors(service_name),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    _logger = structlog.get_logger()


def get_logger() -> structlog.BoundLogger:
    if _logger is None:
        configure_logging("api")
    return _logger


@contextmanager
def run_scope(run_id: Optional[str] = None) -> Iterator[str]:
    """Tag every log line emitted inside the block with one snapshot run id."""
    rid = run_id or uuid.uuid4().hex
    with bound_contextvars(run_id=rid):
        yield rid

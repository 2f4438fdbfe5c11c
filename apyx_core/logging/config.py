"""
Centralized logging configuration for the prediction core.

Library modules obtain loggers through get_logger and the subsystem helpers;
applications call configure_logging (or configure_logging_from_config with
the merged client configuration) once at startup. Reconciliations run on a
thread pool, so every event carries the emitting thread's name.
"""
import logging
import sys
import threading
from typing import Any, Optional

import structlog
from structlog.types import EventDict, FilteringBoundLogger, WrappedLogger


def add_thread_name(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """Tag events with the emitting thread, e.g. reconcile_0."""
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_thread: bool = True
) -> None:
    """
    Configure structlog for the prediction core.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON lines; otherwise console rendering
        include_timestamp: Include an ISO timestamp on every event
        include_thread: Include the emitting thread name on every event
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    if include_thread:
        processors.append(add_thread_name)

    renderer = structlog.processors.JSONRenderer() if format_json else structlog.dev.ConsoleRenderer()
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_config(config: dict[str, Any]) -> None:
    """Configure logging from the "logging" section of a merged client config."""
    section = config.get("logging", {})
    configure_logging(
        level=section.get("level", "INFO"),
        format_json=bool(section.get("format_json", False)),
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Structlog logger for name (typically __name__)."""
    return structlog.get_logger(name)


def get_reconcile_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the duel reconciliation subsystem."""
    return get_logger(name).bind(subsystem="reconcile")


def get_matchmaking_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the matchmaking subsystem."""
    return get_logger(name).bind(subsystem="matchmaking")


def short_address(address: Optional[bytes]) -> Optional[str]:
    """Hex rendering of an account address for log fields."""
    return address.hex() if address is not None else None


def log_reconciliation(
    logger: FilteringBoundLogger,
    duel: Optional[bytes],
    cached_status: Optional[str],
    fetched_status: Optional[str],
    state: str,
    source: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a duel reconciliation outcome with standardized format.

    Args:
        logger: Structlog logger instance
        duel: Address of the duel referenced by the curve
        cached_status: Status cached on the curve snapshot
        fetched_status: Status read from the duel account, if fetched
        state: Resulting reconciliation state
        source: Where the decision came from ("cache", "fetched", "fail_open")
        context: Additional context data
    """
    bound_logger = logger.bind(
        duel=short_address(duel),
        cached_status=cached_status,
        fetched_status=fetched_status,
        reconcile_state=state,
        source=source,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if source == "fail_open":
        bound_logger.warning("Duel reconciled")
    else:
        bound_logger.info("Duel reconciled")

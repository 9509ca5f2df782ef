"""
Centralized logging configuration for the habit tracking system.

This module provides standardized logging configuration using structlog
for all components. Streak changes and plan decisions are logged through
the helpers below so that every decision leaves a consistent audit trail.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_streak_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the streak tracker subsystem."""
    return get_logger(name).bind(
        subsystem="streak_tracker",
        audit_trail=True
    )


def get_planner_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the notification planner subsystem."""
    return get_logger(name).bind(
        subsystem="notification_planner",
        audit_trail=True
    )


def log_streak_transition(
    logger: FilteringBoundLogger,
    routine_id: str,
    from_streak: int,
    to_streak: int,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a streak change with standardized format.

    Args:
        logger: Structlog logger instance
        routine_id: ID of the routine whose streak changed
        from_streak: Streak before the event
        to_streak: Streak after the event
        trigger: Event that caused the change (confirm, skip, catch_up, reset)
        context: Additional context data
    """
    bound_logger = logger.bind(
        routine_id=routine_id,
        from_streak=from_streak,
        to_streak=to_streak,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if to_streak < from_streak:
        bound_logger.warning("Streak reset")
    else:
        bound_logger.info("Streak transition")


def log_plan_decision(
    logger: FilteringBoundLogger,
    step: str,
    outcome: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a notification planning decision with standardized format.

    Args:
        logger: Structlog logger instance
        step: Planning step that made the decision
        outcome: What the step decided (e.g. "empty_plan", "escalated")
        reason: Detailed reason for the decision
        context: Additional context data
    """
    bound_logger = logger.bind(
        step=step,
        outcome=outcome,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Plan decision")

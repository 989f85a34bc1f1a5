"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- user_id
- feature
- duration_ms

Usage:
    from calorel.utils.logging import configure_logging, log_quota_checked

    configure_logging('calorel-api', 'INFO')
    log_quota_checked(logger, user_id='123', feature='diet_plan', outcome='allowed', used=0, limit=1)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (calorel-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        # Configure root logger
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    user_id: Optional[str] = None,
    feature: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        user_id: Optional user ID
        feature: Optional AI feature tag
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if user_id:
        extra["user_id"] = user_id
    if feature:
        extra["feature"] = feature
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Quota event functions

def log_quota_checked(
    logger: logging.Logger,
    user_id: str,
    feature: str,
    outcome: str,
    used: int,
    limit: int,
    time_frame: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a quota check decision.

    Args:
        logger: Logger instance
        user_id: User ID (required)
        feature: Feature tag (required)
        outcome: Decision status (allowed, quota_exceeded)
        used: Usage count observed in the window
        limit: Limit applied
        time_frame: Optional window name (daily, weekly)
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="quota_checked",
        user_id=user_id,
        feature=feature,
        duration_ms=duration_ms,
        outcome=outcome,
        used=used,
        limit=limit,
        **kwargs
    )
    if time_frame:
        extra["time_frame"] = time_frame

    logger.info(f"Quota checked: {feature} {outcome} ({used}/{limit})", extra=extra)


def log_quota_store_unavailable(
    logger: logging.Logger,
    user_id: str,
    feature: str,
    error: str,
    operation: str = "count",
    **kwargs
):
    """
    Log a usage store failure. Stack trace is attached when an exception is being handled.

    Args:
        logger: Logger instance
        user_id: User ID (required)
        feature: Feature tag (required)
        error: Error message (required)
        operation: Store operation that failed (count, append)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="quota_store_unavailable",
        user_id=user_id,
        feature=feature,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Usage store unavailable during {operation}: {error}"
    exc_info = sys.exc_info()
    if exc_info[0] is not None:
        logger.error(message, extra=extra, exc_info=exc_info)
    else:
        logger.error(message, extra=extra)


def log_usage_logged(
    logger: logging.Logger,
    user_id: str,
    feature: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a successfully appended usage record."""
    extra = _build_log_extra(
        event="ai_usage_logged",
        user_id=user_id,
        feature=feature,
        duration_ms=duration_ms,
        **kwargs
    )

    logger.info(f"AI usage logged: {feature}", extra=extra)


def log_usage_log_failed(
    logger: logging.Logger,
    user_id: str,
    feature: str,
    error: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a failed usage append.
    The gated action has already happened, so this is a warning, not an error.
    """
    extra = _build_log_extra(
        event="ai_usage_log_failed",
        user_id=user_id,
        feature=feature,
        duration_ms=duration_ms,
        error=str(error),
        **kwargs
    )

    logger.warning(f"AI usage log failed: {feature} - {error}", extra=extra)


# Nutrition event functions

def log_plan_computed(
    logger: logging.Logger,
    strategy: str,
    calories: int,
    goal: Optional[str] = None,
    user_id: Optional[str] = None,
    **kwargs
):
    """Log a computed nutrition plan."""
    extra = _build_log_extra(
        event="nutrition_plan_computed",
        user_id=user_id,
        strategy=strategy,
        calories=calories,
        **kwargs
    )
    if goal:
        extra["goal"] = goal

    logger.info(f"Nutrition plan computed: {calories} kcal ({strategy})", extra=extra)


def log_input_defaulted(
    logger: logging.Logger,
    field: str,
    value: Any,
    default: Any,
    **kwargs
):
    """Log a calculator input that was replaced by its default."""
    extra = _build_log_extra(
        event="nutrition_input_defaulted",
        field=field,
        value=repr(value),
        default=default,
        **kwargs
    )

    logger.warning(f"Invalid {field}={value!r}, using default {default}", extra=extra)


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)

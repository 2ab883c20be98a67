"""Logging setup with upload transaction context."""
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

CONTEXT_FIELDS = ("transaction_id", "stage", "node")

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class UploadContextFilter(logging.Filter):
    """Add upload context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add default context fields if not present."""
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        if "timestamp" not in log_record:
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_record[field] = value
            else:
                log_record.pop(field, None)


def setup_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """
    Configure logging for the CLI.

    Logs go to stderr so stdout stays clean for command output such as the
    manifest printed by ``space generate``.
    """
    handler = logging.StreamHandler(sys.stderr)

    if json_format:
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)
    handler.addFilter(UploadContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def with_upload_context(
    transaction_id: str | None = None,
    stage: str | None = None,
    node: str | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create an extra dict with upload context for logging.

    Args:
        transaction_id: Upload transaction identifier
        stage: Current upload stage
        node: ``name@version`` of the node being uploaded
        **kwargs: Additional context fields

    Returns:
        Dict to pass as extra parameter to logger methods
    """
    extra = kwargs.copy()
    if transaction_id:
        extra["transaction_id"] = transaction_id
    if stage:
        extra["stage"] = stage
    if node:
        extra["node"] = node
    return extra

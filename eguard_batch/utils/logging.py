"""Structured logging utilities for eguard-batch."""

import logging
from typing import Any

DEFAULT_LOGGER_NAME = "eguard_batch"


class _ContextDefaultFilter(logging.Filter):
    """Give records logged without a ContextLogger an empty context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = ""
        return True


def setup_logger(name: str = DEFAULT_LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Configure the batch logger.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.addFilter(_ContextDefaultFilter())

    # time, level, context, message
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(context)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class ContextLogger:
    """Logger wrapper that renders job/step context as key=value pairs."""

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None) -> None:
        self.logger = logger
        self.context = context or {}

    def _extra(self, extra_context: dict[str, Any]) -> dict[str, str]:
        ctx = {**self.context, **extra_context}
        return {"context": ", ".join(f"{k}={v}" for k, v in ctx.items())}

    def debug(self, message: str, **extra_context: Any) -> None:
        self.logger.debug(message, extra=self._extra(extra_context))

    def info(self, message: str, **extra_context: Any) -> None:
        self.logger.info(message, extra=self._extra(extra_context))

    def warning(self, message: str, **extra_context: Any) -> None:
        self.logger.warning(message, extra=self._extra(extra_context))

    def error(self, message: str, exc_info: bool = False, **extra_context: Any) -> None:
        self.logger.error(message, extra=self._extra(extra_context), exc_info=exc_info)

    def with_context(self, **context: Any) -> "ContextLogger":
        """Create a child logger carrying additional context."""
        return ContextLogger(self.logger, {**self.context, **context})


# Default logger
_default_logger = setup_logger()

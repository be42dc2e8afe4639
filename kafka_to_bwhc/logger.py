"""
Structured logging module for the bridge.

Supports both JSON and text output formats for flexibility in different environments.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from kafka_to_bwhc.config import BridgeConfig


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, bridge_name: str = "kafka-to-bwhc"):
        """Initialize JSON formatter.

        Args:
            bridge_name: Name of the bridge for logging context
        """
        super().__init__()
        self.bridge_name = bridge_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_entry = {
            "timestamp": _utc_now(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "bridge": self.bridge_name,
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def __init__(self, bridge_name: str = "kafka-to-bwhc"):
        super().__init__(
            fmt=f"%(asctime)s [{bridge_name}] %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            line += " " + " ".join(f"{k}={v}" for k, v in extra_fields.items())
        return line


class BridgeLogger:
    """Logger wrapper with structured logging support and processing counters."""

    def __init__(self, config: BridgeConfig):
        """Initialize bridge logger.

        Args:
            config: Bridge configuration
        """
        self.config = config
        self.logger = logging.getLogger("kafka_to_bwhc")
        self._setup_logger()

        self.metrics = {
            "records_consumed": 0,
            "responses_produced": 0,
            "backend_calls": 0,
            "transport_failures": 0,
            "publish_failures": 0,
            "start_time": _utc_now(),
        }

    def _setup_logger(self) -> None:
        """Configure the logger based on config."""
        self.logger.setLevel(getattr(logging, self.config.log_level.upper(), logging.INFO))
        self.logger.handlers.clear()

        if self.config.log_format == "json":
            formatter = JsonFormatter(self.config.bridge_name)
        else:
            formatter = TextFormatter(self.config.bridge_name)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if self.config.log_file:
            file_handler = logging.FileHandler(self.config.log_file)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _log_with_extra(self, level: int, message: str, **extra_fields: Any) -> None:
        """Log with extra structured fields."""
        if not self.logger.isEnabledFor(level):
            return
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None,
        )
        record.extra_fields = extra_fields
        self.logger.handle(record)

    def info(self, message: str, **extra: Any) -> None:
        """Log info message with optional extra fields."""
        self._log_with_extra(logging.INFO, message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        """Log debug message with optional extra fields."""
        self._log_with_extra(logging.DEBUG, message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Log warning message with optional extra fields."""
        self._log_with_extra(logging.WARNING, message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Log error message with optional extra fields."""
        self._log_with_extra(logging.ERROR, message, **extra)

    def exception(self, message: str, **extra: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, extra={"extra_fields": extra})

    # Counters
    def record_consumed(self) -> None:
        self.metrics["records_consumed"] += 1

    def record_produced(self) -> None:
        self.metrics["responses_produced"] += 1

    def record_backend_call(self, reachable: bool = True) -> None:
        """Record a backend call; unreachable calls also count as transport failures."""
        self.metrics["backend_calls"] += 1
        if not reachable:
            self.metrics["transport_failures"] += 1

    def record_publish_failure(self) -> None:
        self.metrics["publish_failures"] += 1

    def get_metrics(self) -> dict:
        """Get current metrics."""
        return {
            **self.metrics,
            "current_time": _utc_now(),
        }

    def log_metrics(self) -> None:
        """Log current metrics."""
        self.info("Bridge metrics", **self.get_metrics())

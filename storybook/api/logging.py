"""Structured logging for the API layer.

JSON lines in production, plain text in development. StoryLogger emits
the per-story lifecycle events; pipeline stages log through their own
module loggers with the same extra fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Record attributes copied into the JSON payload when present
EXTRA_FIELDS = (
    "story_id",
    "stage",
    "duration",
    "error_type",
    "page_number",
    "story_length",
    "reason",
)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Provider client libraries log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "LiteLLM", "google_genai")


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(
            (name, getattr(record, name))
            for name in EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


class StoryLogger:
    """Logger for story generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("story_generation")

    def generation_started(self, story_id: str, story_length: str) -> None:
        self.logger.info(
            "Story generation started",
            extra={"story_id": story_id, "stage": "started", "story_length": story_length},
        )

    def generation_completed(self, story_id: str, duration: float) -> None:
        self.logger.info(
            "Story generation completed",
            extra={"story_id": story_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def generation_failed(self, story_id: str, error: Exception) -> None:
        self.logger.error(
            f"Story generation failed: {error}",
            extra={"story_id": story_id, "stage": "failed", "error_type": type(error).__name__},
            exc_info=True,
        )

    def fallback_used(self, story_id: str, reason: str) -> None:
        self.logger.warning(
            f"Fallback story used: {reason}",
            extra={"story_id": story_id, "stage": "fallen_back", "reason": reason},
        )

    def persistence_failed(self, story_id: str, error: Exception) -> None:
        self.logger.error(
            f"Failed to archive story: {error}",
            extra={"story_id": story_id, "stage": "archive", "error_type": type(error).__name__},
            exc_info=True,
        )


# Global story logger instance
story_logger = StoryLogger()

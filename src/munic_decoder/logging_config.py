"""
Structured logging helpers.

Purpose:
- Provide a consistent log format for the decoder diagnostics.
- Support JSONL output for easy ingestion by downstream tools.
"""

from __future__ import annotations

import json
import logging
import time

from .config import DecoderSettings

PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """
    JSONL formatter for structured logs.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """
    Configure root logging with optional JSONL output.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def setup_logging_from_settings(settings: DecoderSettings) -> None:
    """
    Apply log_level/json_logs from DecoderSettings.

    log_documents only shows up at DEBUG, so it raises the decoder loggers
    to DEBUG without touching the root level.
    """

    setup_logging(settings.log_level, json_output=settings.json_logs)
    if settings.log_documents:
        logging.getLogger("munic_decoder").setLevel(logging.DEBUG)

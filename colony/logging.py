"""Logging configuration for Colony.

Everything logs under the ``colony`` logger tree. Ledger appends and
coordination phases attach ``extra`` fields (``message_id``, ``sender_id``,
``recipients``, ``message_type``, ``phase``), which the JSON formatter emits
as top-level keys so a run can be replayed from the log alone.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from colony.config import ColonyConfig

ROOT_LOGGER = "colony"
LOG_FORMATS = ("text", "json")

# 10MB per file, 3 backups
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 3


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including swarm context fields."""

    _CONTEXT_FIELDS = ("message_id", "sender_id", "recipients", "message_type", "phase", "agent")

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self._CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """``time | logger | level | [phase] message``."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        phase = getattr(record, "phase", None)
        if phase is not None:
            record.message = f"[{phase}] {record.message}"
        return super().formatMessage(record)


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONFormatter()
    if log_format == "text":
        return TextFormatter()
    raise ValueError(f"Unknown log format {log_format!r}; expected one of {LOG_FORMATS}")


def configure_logging(config: ColonyConfig, verbose: bool = False) -> logging.Logger:
    """Install handlers on the ``colony`` logger from a config.

    The log file (when ``config.log_to_file`` and ``config.log_file`` are set)
    receives every record at ``config.log_level`` in ``config.log_format``.
    The stderr console shows warnings only, or everything at the configured
    level when ``verbose``.

    Calling it again replaces the previous handlers.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if config.log_to_file and config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_file,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(_formatter(config.log_format))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level if verbose else max(level, logging.WARNING))
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the colony tree, e.g. ``get_logger("swarm")`` → ``colony.swarm``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")

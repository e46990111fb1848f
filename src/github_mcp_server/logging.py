"""Structured JSON logging for github-mcp-server.

stdout carries JSON-RPC only, so logs go to stderr, or to a rotating file
(5MB, 3 backups) when ``--log-file`` is given.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "github_mcp_server"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        if hasattr(record, "tool"):
            entry["tool"] = record.tool
        if hasattr(record, "args_data"):
            entry["args"] = record.args_data
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = record.duration_ms
        if hasattr(record, "error"):
            entry["error"] = record.error
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _is_ours(handler: logging.Handler) -> bool:
    return isinstance(handler.formatter, _JsonFormatter)


def setup_logging(log_file: Path | str | None = None, level: int = logging.INFO) -> logging.Logger:
    """Attach a JSON handler to the ``github_mcp_server`` logger.

    Idempotent: a second call with the same target returns the logger
    unchanged; a call with a different target replaces the old handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    target = os.path.abspath(str(log_file)) if log_file else None

    with _setup_lock:
        for h in logger.handlers[:]:
            if not _is_ours(h):
                continue
            if isinstance(h, RotatingFileHandler):
                if h.baseFilename == target:
                    logger.setLevel(level)
                    return logger
            elif target is None:
                logger.setLevel(level)
                return logger
            # Different target: drop the stale handler.
            logger.removeHandler(h)
            h.close()

        handler: logging.Handler
        if target is None:
            handler = logging.StreamHandler(sys.stderr)
        else:
            handler = RotatingFileHandler(target, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return logger

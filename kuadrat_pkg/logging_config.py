"""Structured logging configuration for Kuadrat.

Solves may run in a child process (see worker.py), so every record carries
the role of the process that wrote it: ``main`` for the CLI or library
caller, ``worker`` for the child. The child logs to stderr; the parent
relays those lines into its own log with ``relay_worker_log``.
"""

import logging
import re
import sys
from datetime import datetime
from typing import Optional

ROLE_MAIN = "main"
ROLE_WORKER = "worker"

_role = ROLE_MAIN

_WORKER_RECORD_RE = re.compile(
    rf"\[(DEBUG|INFO|WARNING|ERROR|CRITICAL)\] {ROLE_WORKER}/\d+ "
)


class StructuredFormatter(logging.Formatter):
    """Format records as ``timestamp [LEVEL] role/pid logger: message``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = (
            f"{timestamp} [{record.levelname}] {_role}/{record.process} "
            f"{record.name}: {record.getMessage()}"
        )
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: str = "WARNING", log_file: Optional[str] = None, role: str = ROLE_MAIN
) -> logging.Logger:
    """Set up structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs (stderr is always used)
        role: ROLE_MAIN, or ROLE_WORKER inside a worker child

    Returns:
        Configured logger instance
    """
    global _role
    _role = role

    logger = logging.getLogger("kuadrat")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    # The worker's stderr is read by the parent; only the parent writes files
    if log_file and role == ROLE_MAIN:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "kuadrat") -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically module name)

    Returns:
        Logger instance
    """
    return logging.getLogger(f"kuadrat.{name}")


def current_level_name() -> str:
    """Effective level of the ``kuadrat`` logger, for passing to a child."""
    return logging.getLevelName(logging.getLogger("kuadrat").getEffectiveLevel())


def relay_worker_log(stderr_text: str) -> int:
    """Re-emit a worker child's stderr lines under ``kuadrat.worker.child``.

    Formatted child records keep the level they were written at. Anything
    else (a traceback, a crash message from the interpreter) is forwarded
    at WARNING.

    Returns:
        Number of lines relayed
    """
    logger = get_logger("worker.child")
    relayed = 0
    for line in stderr_text.splitlines():
        if not line.strip():
            continue
        match = _WORKER_RECORD_RE.search(line)
        level = logging.getLevelName(match.group(1)) if match else logging.WARNING
        logger.log(level, line)
        relayed += 1
    return relayed

"""
Logging configuration for rkeys.

Supports two output formats:
  - **human** – coloured, single-line, readable
  - **json**  – newline-delimited JSON for log aggregators

Every handler installed here carries a ``RedactKeysFilter`` so that
anything shaped like a private key never reaches an output.

Usage:
    from rkeys_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="rkeys.log")
    setup_logging_from_config(load_config("rkeys.toml").logging)
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rkeys_core.config import LoggingConfig

# 32-byte keys as hex, optionally with the 00/ED key-type prefix
_KEY_HEX = re.compile(r"\b(?:00|ED|ed)?[0-9A-Fa-f]{64}\b")
REDACTED = "[REDACTED]"


class RedactKeysFilter(logging.Filter):
    """Replace private-key-shaped hex runs in a record's message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        scrubbed = _KEY_HEX.sub(REDACTED, message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


class _HumanFormatter(logging.Formatter):
    """Coloured, concise single-line format."""

    COLOURS = {
        "DEBUG": "\033[36m",     # cyan
        "INFO": "\033[32m",      # green
        "WARNING": "\033[33m",   # yellow
        "ERROR": "\033[31m",     # red
        "CRITICAL": "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        return (
            f"{colour}{ts} [{record.levelname:<8}]{self.RESET} "
            f"{record.name}: {record.getMessage()}"
        )


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``rkeys`` logger hierarchy.

    Only the package logger is touched; the application's root logger is
    left alone.  Returns the configured logger.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
    fmt : str
        ``"human"`` for coloured single-line output, ``"json"`` for
        newline-delimited JSON.
    log_file : str, optional
        If provided, logs are *also* written to this file (always in JSON
        format for machine parsing).
    """
    log = logging.getLogger("rkeys")
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    log.propagate = False

    # Remove any existing handlers (avoid duplicates on reload)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    redact = RedactKeysFilter()

    # --- Console handler ---
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_JSONFormatter() if fmt == "json" else _HumanFormatter())
    console.addFilter(redact)
    log.addHandler(console)

    # --- Optional file handler ---
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path))
        fh.setFormatter(_JSONFormatter())  # always JSON for files
        fh.addFilter(redact)
        log.addHandler(fh)

    return log


def setup_logging_from_config(config: LoggingConfig) -> logging.Logger:
    """Apply the ``[logging]`` section of a loaded configuration."""
    return setup_logging(level=config.level, fmt=config.format, log_file=config.file)

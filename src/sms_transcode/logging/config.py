"""Root logger setup.

configure_logging() installs handlers on the root logger according to a
LoggingConfig. Every handler carries a ProfileContextFilter, so records
emitted while serving a profile are tagged with it.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from sms_transcode.logging.context import ProfileContextFilter
from sms_transcode.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from sms_transcode.config.models import LoggingConfig

# profile_tag is "[P1a2b3c4d:client] " inside a profile context, else empty
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(profile_tag)s%(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _formatter(format: str) -> logging.Formatter:
    if format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or None if it cannot be created."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger handlers according to a LoggingConfig.

    Output goes to the log file when one is configured and can be opened,
    and to stderr when ``include_stderr`` is set or no file is in use.

    Args:
        config: Logging configuration.
    """
    level = logging.getLevelNamesMapping().get(config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _formatter(config.format)
    context_filter = ProfileContextFilter()

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

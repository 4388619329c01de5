"""JSON log formatting.

Each record becomes one JSON object per line. Profile fields injected by
ProfileContextFilter are lifted into a top level ``profile`` object so log
processors can group the records of one playback session without parsing
messages.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}

# Set by ProfileContextFilter
_PROFILE_ATTRS: frozenset[str] = frozenset({"profile_id", "client", "profile_tag"})


class JSONFormatter(logging.Formatter):
    """Format log records as single line JSON objects.

    Keys:
    - timestamp: ISO-8601 UTC
    - level, logger, message
    - profile: profile_id and client while serving a profile
    - context: values passed through ``extra``
    - exception / stack: formatted traceback and stack, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        profile = {
            key: getattr(record, key)
            for key in ("profile_id", "client")
            if getattr(record, key, None)
        }
        if profile:
            entry["profile"] = profile

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _PROFILE_ATTRS
            and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)

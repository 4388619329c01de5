"""Structured logging module.

Provides configurable logging with JSON format support and file rotation,
plus a per-profile context injected into every record.
"""

from sms_transcode.logging.config import configure_logging
from sms_transcode.logging.context import (
    ProfileContextFilter,
    clear_profile_context,
    get_profile_context,
    profile_context,
    set_profile_context,
)
from sms_transcode.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "ProfileContextFilter",
    "clear_profile_context",
    "configure_logging",
    "get_profile_context",
    "profile_context",
    "set_profile_context",
]

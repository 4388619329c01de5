"""Exceptions for sms_transcode.

Negotiation and command synthesis report missing input and unviable
requests through None results. These exceptions cover programming and
configuration faults only.
"""


class TranscodeError(Exception):
    """Base exception for sms_transcode errors."""


class DuplicateProfileError(TranscodeError):
    """A profile with the same identifier is already registered."""


class TranscoderNotFoundError(TranscodeError):
    """No usable transcoder binary was found."""


class ConfigError(TranscodeError):
    """Invalid configuration value."""

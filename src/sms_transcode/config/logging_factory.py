"""Merging of command line logging options into the loaded configuration."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from sms_transcode.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a copy of ``base`` with every non-None override applied.

    Rotation settings always come from ``base``. The copy is validated
    again, so an invalid override raises ValueError.
    """
    overrides = {
        name: value
        for name, value in (
            ("level", level),
            ("file", file),
            ("format", format),
            ("include_stderr", include_stderr),
        )
        if value is not None
    }
    return dataclasses.replace(base, **overrides)


def configure_logging_from_cli(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
) -> LoggingConfig:
    """Load the configuration, apply CLI overrides and install logging.

    Returns:
        The logging configuration that was installed.
    """
    from sms_transcode.config.loader import get_config
    from sms_transcode.logging import configure_logging

    merged = build_logging_config(
        get_config(config_path=config_path).logging,
        level=level,
        file=file,
        format=format,
    )
    configure_logging(merged)
    return merged

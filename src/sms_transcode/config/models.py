"""Configuration data models.

This module defines dataclasses for sms_transcode configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DATA_DIR = Path.home() / ".sms"

# Accelerators the synthesizer knows how to drive, in default preference order
KNOWN_ACCELERATORS: tuple[str, ...] = ("vaapi", "cuvid")


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    If the transcoder is not specified it is looked up in PATH.
    """

    transcoder: Path | None = None


@dataclass
class StreamingConfig:
    """Configuration for stream output."""

    # Root for the streams/<profile-id>/ output directories
    cache_directory: Path = field(default_factory=lambda: DEFAULT_DATA_DIR / "cache")

    data_directory: Path = DEFAULT_DATA_DIR

    # Segment duration in seconds for segmented (HLS) delivery
    segment_duration: int = 10

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.segment_duration <= 0:
            raise ValueError(
                f"segment_duration must be positive, got {self.segment_duration}"
            )


@dataclass
class HardwareConfig:
    """Configuration for hardware accelerated transcoding."""

    enabled: bool = True

    # Accelerators to use if available, in order of preference
    accelerators: tuple[str, ...] = KNOWN_ACCELERATORS

    # DRM render node used by VAAPI
    vaapi_device: Path = Path("/dev/dri/renderD128")

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.accelerators = tuple(a.lower() for a in self.accelerators)
        unknown = set(self.accelerators) - set(KNOWN_ACCELERATORS)
        if unknown:
            raise ValueError(
                f"accelerators must be in {KNOWN_ACCELERATORS}, got {sorted(unknown)}"
            )


LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class LoggingConfig:
    """Where and how log records are written.

    With no ``file`` records go to stderr. Files rotate at ``max_bytes``
    and ``backup_count`` old files are kept.
    """

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    include_stderr: bool = False
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    def __post_init__(self) -> None:
        if self.level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(LOG_LEVELS)}, got {self.level!r}"
            )
        if self.format.lower() not in LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(LOG_FORMATS)}, got {self.format!r}"
            )


@dataclass
class SMSConfig:
    """Main configuration container.

    Aggregates all configuration sections.
    """

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    hardware: HardwareConfig = field(default_factory=HardwareConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def accelerators(self) -> tuple[str, ...]:
        """Accelerators to probe for, empty when hardware is disabled."""
        if not self.hardware.enabled:
            return ()
        return self.hardware.accelerators

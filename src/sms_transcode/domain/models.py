"""Domain models for source media, capability requests and decisions.

Source descriptors and decisions are frozen dataclasses: the scanner
produces media elements once, and a decision set is computed once per
profile and then shared by every command synthesis call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sms_transcode.domain.enums import MediaElementType, StreamType

if TYPE_CHECKING:
    from sms_transcode.domain.schemas import CapabilityProfile


COPY = "copy"
"""Codec marker meaning the source stream is passed through unmodified."""


@dataclass(frozen=True, order=True)
class Resolution:
    """Frame dimensions in pixels."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


# =============================================================================
# Source Media Descriptor
# =============================================================================


@dataclass(frozen=True)
class VideoStream:
    """Video stream of a media element."""

    codec: str
    width: int = 0
    height: int = 0
    bitrate: int = 0  # kb/s

    @property
    def resolution(self) -> Resolution:
        return Resolution(self.width, self.height)


@dataclass(frozen=True)
class AudioStream:
    """Audio stream of a media element."""

    codec: str
    sample_rate: int = 0  # Hz
    configuration: str | None = None  # Channel layout, e.g. "stereo", "5.1"
    bitrate: int = 0  # kb/s


@dataclass(frozen=True)
class SubtitleStream:
    """Subtitle stream of a media element.

    ``index`` is the position of the stream among the element's subtitle
    streams, which is how the transcoder addresses it (``0:s:<index>``).
    """

    format: str
    index: int = 0
    forced: bool = False
    language: str | None = None


@dataclass(frozen=True)
class MediaElement:
    """Source media descriptor as catalogued by the library scanner."""

    path: Path
    type: MediaElementType
    bitrate: int = 0  # Overall bitrate in kb/s
    video_stream: VideoStream | None = None
    audio_streams: tuple[AudioStream, ...] = ()
    subtitle_streams: tuple[SubtitleStream, ...] = ()
    id: UUID = field(default_factory=uuid4)
    title: str | None = None


# =============================================================================
# Transcode Decision Set
# =============================================================================


@dataclass(frozen=True)
class VideoTranscode:
    """Decision for the video stream."""

    codec: str
    """Target codec, or ``"copy"``."""

    resolution: Resolution | None = None
    """Target resolution; None preserves the native resolution."""

    @property
    def is_copy(self) -> bool:
        return self.codec == COPY


@dataclass(frozen=True)
class AudioTranscode:
    """Decision for one audio stream."""

    codec: str
    """Encoder name, or ``"copy"``."""

    quality: int | None = None
    sample_rate: int | None = None
    downmix: bool = False

    @property
    def is_copy(self) -> bool:
        return self.codec == COPY

    @property
    def channels(self) -> int | None:
        """Forced output channel count, None keeps the source layout."""
        return 2 if self.downmix else None


@dataclass(frozen=True)
class SubtitleTranscode:
    """Decision for one subtitle stream."""

    codec: str
    """Target subtitle codec, or ``"copy"``."""

    hardcoded: bool = False
    """True when the subtitle must be burned into the video image."""

    @property
    def is_copy(self) -> bool:
        return self.codec == COPY


@dataclass(frozen=True)
class TranscodeDecisionSet:
    """All negotiated decisions for one profile.

    Audio and subtitle decisions are index-aligned with the source
    element's audio and subtitle streams.
    """

    quality: int
    format: str | None = None
    video: VideoTranscode | None = None
    audio: tuple[AudioTranscode, ...] | None = None
    subtitles: tuple[SubtitleTranscode, ...] | None = None
    audio_track: int | None = None
    subtitle_track: int | None = None

    @property
    def requires_video_conversion(self) -> bool:
        """True when the video stream is re-encoded rather than copied."""
        return self.video is not None and not self.video.is_copy

    def selected_subtitle(self) -> SubtitleTranscode | None:
        """Decision for the selected subtitle track, if any."""
        if self.subtitles is None or self.subtitle_track is None:
            return None
        if not 0 <= self.subtitle_track < len(self.subtitles):
            return None
        return self.subtitles[self.subtitle_track]


# =============================================================================
# Transcode Profile
# =============================================================================


@dataclass
class TranscodeProfile:
    """Per-session pairing of a media element, a capability request and
    its negotiated decisions."""

    media: MediaElement | None
    capabilities: CapabilityProfile
    type: StreamType = StreamType.TRANSCODE
    id: UUID = field(default_factory=uuid4)
    decisions: TranscodeDecisionSet | None = None

    @property
    def is_negotiated(self) -> bool:
        return self.decisions is not None

    @property
    def client(self) -> str | None:
        return self.capabilities.client

    @property
    def offset(self) -> int:
        return self.capabilities.offset

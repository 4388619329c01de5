"""Negotiation result types.

Each negotiator returns one of these frozen results, or None when the
request lacks required input or no viable codec exists.
"""

from dataclasses import dataclass
from enum import Enum

from sms_transcode.domain.models import (
    AudioTranscode,
    SubtitleTranscode,
    VideoTranscode,
)


class TranscodeReasonCode(Enum):
    """Why a stream cannot be delivered unmodified."""

    CODEC_UNSUPPORTED = "codec_unsupported"
    MULTICHANNEL_UNSUPPORTED = "multichannel_unsupported"
    BITRATE_EXCEEDED = "bitrate_exceeded"
    QUALITY_BITRATE_EXCEEDED = "quality_bitrate_exceeded"
    RESOLUTION_EXCEEDED = "resolution_exceeded"
    SAMPLE_RATE_EXCEEDED = "sample_rate_exceeded"
    CONTAINER_UNSUPPORTED = "container_unsupported"
    CODEC_NOT_STREAMABLE = "codec_not_streamable"


@dataclass(frozen=True)
class TranscodeReason:
    """Structured reason for transcoding a stream."""

    code: TranscodeReasonCode
    detail: str | None = None

    def __str__(self) -> str:
        if self.detail:
            return f"{self.code.value} ({self.detail})"
        return self.code.value


@dataclass(frozen=True)
class VideoNegotiation:
    """Result of video negotiation."""

    transcode: VideoTranscode
    quality: int
    """Requested quality clamped to what the source supports."""

    reasons: tuple[TranscodeReason, ...] = ()


@dataclass(frozen=True)
class AudioNegotiation:
    """Result of audio negotiation, one decision per source audio stream."""

    transcodes: tuple[AudioTranscode, ...]
    format: str | None
    """Container format, inferred from the audio codec when it was unset."""

    audio_track: int | None = None
    reasons: tuple[tuple[TranscodeReason, ...], ...] = ()


@dataclass(frozen=True)
class SubtitleNegotiation:
    """Result of subtitle negotiation, one decision per subtitle stream."""

    transcodes: tuple[SubtitleTranscode, ...]
    subtitle_track: int | None = None

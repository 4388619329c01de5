"""Domain types for the transcode negotiation engine."""

from sms_transcode.domain.enums import (
    AudioQuality,
    MediaElementType,
    SegmentType,
    StreamType,
    VideoQuality,
)
from sms_transcode.domain.models import (
    COPY,
    AudioStream,
    AudioTranscode,
    MediaElement,
    Resolution,
    SubtitleStream,
    SubtitleTranscode,
    TranscodeDecisionSet,
    TranscodeProfile,
    VideoStream,
    VideoTranscode,
)
from sms_transcode.domain.schemas import CapabilityProfile, MediaElementModel

__all__ = [
    # Enums
    "AudioQuality",
    "MediaElementType",
    "SegmentType",
    "StreamType",
    "VideoQuality",
    # Source media
    "AudioStream",
    "MediaElement",
    "Resolution",
    "SubtitleStream",
    "VideoStream",
    # Decisions
    "COPY",
    "AudioTranscode",
    "SubtitleTranscode",
    "TranscodeDecisionSet",
    "TranscodeProfile",
    "VideoTranscode",
    # Boundary schemas
    "CapabilityProfile",
    "MediaElementModel",
]

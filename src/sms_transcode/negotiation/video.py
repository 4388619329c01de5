"""Video stream negotiation.

Decides whether the video stream of a media element can be copied for a
client, and if not which codec and resolution to transcode to.
"""

from __future__ import annotations

import logging

from sms_transcode.core.codecs import (
    TRANSCODE_VIDEO_CODECS,
    is_codec_compatible,
    is_supported,
)
from sms_transcode.core.quality import (
    VIDEO_QUALITY_MAX_BITRATE,
    VIDEO_QUALITY_RESOLUTION,
    compare_dimensions,
    get_highest_video_quality,
    get_video_resolution,
    is_valid_video_quality,
)
from sms_transcode.domain.enums import MediaElementType
from sms_transcode.domain.models import (
    COPY,
    MediaElement,
    VideoStream,
    VideoTranscode,
)
from sms_transcode.domain.schemas import CapabilityProfile
from sms_transcode.negotiation.types import (
    TranscodeReason,
    TranscodeReasonCode,
    VideoNegotiation,
)

logger = logging.getLogger(__name__)


def video_transcode_reasons(
    media: MediaElement,
    capabilities: CapabilityProfile,
    quality: int,
    stream: VideoStream,
) -> tuple[TranscodeReason, ...]:
    """Collect the reasons a video stream cannot be copied.

    Container compatibility is not checked here.

    Args:
        media: Source media element.
        capabilities: Client capability profile.
        quality: Video quality to check the stream against.
        stream: Video stream of the media element.

    Returns:
        Reasons for transcoding; empty if the stream can be copied.
    """
    reasons: list[TranscodeReason] = []

    if not is_supported(capabilities.codecs, stream.codec):
        reasons.append(
            TranscodeReason(TranscodeReasonCode.CODEC_UNSUPPORTED, stream.codec)
        )

    max_bitrate = capabilities.max_bitrate
    if max_bitrate is not None and media.bitrate > max_bitrate:
        reasons.append(
            TranscodeReason(
                TranscodeReasonCode.BITRATE_EXCEEDED,
                f"{media.bitrate} > {max_bitrate} kb/s",
            )
        )

    if not capabilities.direct_play:
        tier_bitrate = VIDEO_QUALITY_MAX_BITRATE[quality]
        if media.bitrate > tier_bitrate:
            reasons.append(
                TranscodeReason(
                    TranscodeReasonCode.QUALITY_BITRATE_EXCEEDED,
                    f"{media.bitrate} > {tier_bitrate} kb/s",
                )
            )

        ceiling = VIDEO_QUALITY_RESOLUTION[quality]
        if compare_dimensions(stream.resolution, ceiling) == 1:
            reasons.append(
                TranscodeReason(
                    TranscodeReasonCode.RESOLUTION_EXCEEDED,
                    f"{stream.resolution} > {ceiling}",
                )
            )

    return tuple(reasons)


def clamp_video_quality(stream: VideoStream, requested: int, bitrate: int = 0) -> int:
    """Clamp a requested quality down to the highest the source supports."""
    highest = get_highest_video_quality(stream.width, stream.height, bitrate)
    if highest is not None and highest < requested:
        return int(highest)
    return requested


def negotiate_video(
    media: MediaElement | None,
    capabilities: CapabilityProfile,
) -> VideoNegotiation | None:
    """Negotiate the video stream of a media element.

    Args:
        media: Source media element.
        capabilities: Client capability profile.

    Returns:
        VideoNegotiation, or None if required input is missing or no
        acceptable codec can be produced for the target container.
    """
    if (
        media is None
        or capabilities.codecs is None
        or capabilities.format is None
        or capabilities.quality is None
    ):
        logger.warning("Cannot negotiate video: incomplete capability profile")
        return None

    if media.type is not MediaElementType.VIDEO:
        logger.debug("Skipping video negotiation for %s element", media.type.value)
        return None

    stream = media.video_stream
    if stream is None:
        logger.warning("Cannot negotiate video: %s has no video stream", media.path)
        return None

    if not is_valid_video_quality(capabilities.quality):
        logger.warning(
            "Cannot negotiate video: invalid quality %s", capabilities.quality
        )
        return None

    quality = clamp_video_quality(stream, capabilities.quality, media.bitrate)
    if quality != capabilities.quality:
        logger.debug(
            "Video quality clamped from %d to %d", capabilities.quality, quality
        )

    reasons = list(video_transcode_reasons(media, capabilities, quality, stream))

    # The container has the final say even when the client accepts the codec
    if not reasons and not is_codec_compatible(stream.codec, capabilities.format):
        reasons.append(
            TranscodeReason(
                TranscodeReasonCode.CONTAINER_UNSUPPORTED,
                f"{stream.codec} in {capabilities.format}",
            )
        )

    if not reasons:
        return VideoNegotiation(transcode=VideoTranscode(COPY), quality=quality)

    logger.debug("Video transcode needed: %s", ", ".join(map(str, reasons)))

    codec = next(
        (
            candidate
            for candidate in capabilities.codecs
            if is_codec_compatible(candidate, capabilities.format)
            and is_supported(TRANSCODE_VIDEO_CODECS, candidate)
        ),
        None,
    )
    if codec is None:
        logger.warning(
            "No transcodable video codec in %s for format %s",
            list(capabilities.codecs),
            capabilities.format,
        )
        return None

    # Native resolution is preserved when direct play is enabled
    resolution = None
    if not capabilities.direct_play:
        resolution = get_video_resolution(stream.width, stream.height, quality)

    logger.debug("Video transcode target: %s at %s", codec, resolution or "native")

    return VideoNegotiation(
        transcode=VideoTranscode(codec, resolution),
        quality=quality,
        reasons=tuple(reasons),
    )

"""Subtitle stream negotiation."""

from __future__ import annotations

import logging

from sms_transcode.core.codecs import (
    PICTURE_SUBTITLE_CODECS,
    SUPPORTED_SUBTITLE_CODECS,
    TEXT_SUBTITLE_CODECS,
    TEXT_SUBTITLE_TARGET,
    is_codec_compatible,
    is_supported,
)
from sms_transcode.domain.enums import MediaElementType
from sms_transcode.domain.models import (
    COPY,
    MediaElement,
    SubtitleStream,
    SubtitleTranscode,
)
from sms_transcode.domain.schemas import CapabilityProfile
from sms_transcode.negotiation.types import SubtitleNegotiation

logger = logging.getLogger(__name__)


def decide_subtitle(
    stream: SubtitleStream, capabilities: CapabilityProfile
) -> SubtitleTranscode:
    """Decide how one subtitle stream is delivered.

    Text formats are converted to WebVTT, picture formats are burned into
    the video and unrecognized formats are passed through.
    """
    if is_supported(capabilities.codecs, stream.format) and is_codec_compatible(
        stream.format, capabilities.format
    ):
        return SubtitleTranscode(COPY)

    if not is_supported(SUPPORTED_SUBTITLE_CODECS, stream.format):
        logger.debug("Unrecognized subtitle format %s, copying", stream.format)
        return SubtitleTranscode(COPY)

    if is_supported(TEXT_SUBTITLE_CODECS, stream.format):
        return SubtitleTranscode(TEXT_SUBTITLE_TARGET)

    if is_supported(PICTURE_SUBTITLE_CODECS, stream.format):
        return SubtitleTranscode(stream.format, hardcoded=True)

    return SubtitleTranscode(COPY)


def negotiate_subtitles(
    media: MediaElement | None,
    capabilities: CapabilityProfile,
) -> SubtitleNegotiation | None:
    """Negotiate every subtitle stream of a video element.

    Args:
        media: Source media element.
        capabilities: Client capability profile.

    Returns:
        SubtitleNegotiation, or None if required input is missing or the
        element is not a video.
    """
    if media is None or capabilities.codecs is None or capabilities.format is None:
        logger.warning("Cannot negotiate subtitles: incomplete capability profile")
        return None

    if media.type is not MediaElementType.VIDEO:
        return None

    subtitle_track = capabilities.subtitle_track
    transcodes = []

    for stream in media.subtitle_streams:
        # Forced subtitles are enabled by default
        if stream.forced and subtitle_track is None:
            subtitle_track = stream.index
            logger.debug("Selecting forced subtitle track %d", stream.index)

        transcodes.append(decide_subtitle(stream, capabilities))

    return SubtitleNegotiation(
        transcodes=tuple(transcodes), subtitle_track=subtitle_track
    )

"""Capability negotiation.

Negotiation is a set of pure functions over a media element and a client
capability profile. ``negotiate`` combines the per-stream negotiators into
a frozen TranscodeDecisionSet; ``negotiate_profile`` attaches it to a
TranscodeProfile exactly once.
"""

from __future__ import annotations

import logging

from sms_transcode.core.codecs import is_supported
from sms_transcode.core.quality import is_valid_audio_quality, is_valid_video_quality
from sms_transcode.domain.enums import MediaElementType
from sms_transcode.domain.models import (
    MediaElement,
    TranscodeDecisionSet,
    TranscodeProfile,
)
from sms_transcode.domain.schemas import CapabilityProfile
from sms_transcode.logging.context import profile_context
from sms_transcode.negotiation.audio import (
    audio_transcode_reasons,
    get_max_sample_rate,
    negotiate_audio,
)
from sms_transcode.negotiation.subtitles import decide_subtitle, negotiate_subtitles
from sms_transcode.negotiation.types import (
    AudioNegotiation,
    SubtitleNegotiation,
    TranscodeReason,
    TranscodeReasonCode,
    VideoNegotiation,
)
from sms_transcode.negotiation.video import (
    clamp_video_quality,
    negotiate_video,
    video_transcode_reasons,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AudioNegotiation",
    "SubtitleNegotiation",
    "TranscodeReason",
    "TranscodeReasonCode",
    "VideoNegotiation",
    "audio_transcode_reasons",
    "clamp_video_quality",
    "decide_subtitle",
    "is_transcode_required",
    "negotiate",
    "negotiate_audio",
    "negotiate_profile",
    "negotiate_subtitles",
    "negotiate_video",
    "video_transcode_reasons",
]


def is_transcode_required(
    media: MediaElement | None, capabilities: CapabilityProfile
) -> bool | None:
    """Check whether any stream of a media element needs work for a client.

    Used to choose between serving the file directly and setting up a
    transcode. Container compatibility is not considered.

    Returns:
        True or False, or None if required input is missing.
    """
    if media is None or capabilities.quality is None or capabilities.codecs is None:
        return None

    quality = capabilities.quality

    if media.video_stream is not None:
        if not is_valid_video_quality(quality):
            return None
        if video_transcode_reasons(media, capabilities, quality, media.video_stream):
            return True

    if media.type is MediaElementType.AUDIO and not is_valid_audio_quality(quality):
        return None

    max_sample_rate = get_max_sample_rate(media, capabilities, quality)
    for stream in media.audio_streams:
        reasons = audio_transcode_reasons(
            media, capabilities, stream, quality, max_sample_rate
        )
        if reasons:
            return True

    return any(
        not is_supported(capabilities.codecs, stream.format)
        for stream in media.subtitle_streams
    )


def negotiate(
    media: MediaElement | None,
    capabilities: CapabilityProfile,
) -> TranscodeDecisionSet | None:
    """Negotiate every stream of a media element for a client.

    Video elements negotiate subtitles, then video, then audio at the
    negotiated video quality. Audio elements negotiate audio only.

    Args:
        media: Source media element.
        capabilities: Client capability profile.

    Returns:
        Complete decision set, or None if input is missing or no viable
        codec exists for some stream.
    """
    if media is None:
        logger.warning("Cannot negotiate: no media element")
        return None

    if media.type is MediaElementType.VIDEO:
        subtitles = negotiate_subtitles(media, capabilities)
        if subtitles is None:
            return None

        video = negotiate_video(media, capabilities)
        if video is None:
            return None

        audio = negotiate_audio(media, capabilities, quality=video.quality)
        if audio is None:
            return None

        return TranscodeDecisionSet(
            quality=video.quality,
            format=audio.format,
            video=video.transcode,
            audio=audio.transcodes,
            subtitles=subtitles.transcodes,
            audio_track=audio.audio_track,
            subtitle_track=subtitles.subtitle_track,
        )

    if media.type is MediaElementType.AUDIO:
        audio = negotiate_audio(media, capabilities)
        if audio is None:
            return None

        return TranscodeDecisionSet(
            quality=capabilities.quality,
            format=audio.format,
            audio=audio.transcodes,
            audio_track=audio.audio_track,
        )

    logger.warning("Cannot negotiate %s element %s", media.type.value, media.path)
    return None


def negotiate_profile(profile: TranscodeProfile) -> bool:
    """Compute and attach the decision set of a profile.

    Decisions are computed once; later calls reuse them.

    Returns:
        True if the profile carries decisions, False if negotiation failed.
    """
    if profile.decisions is not None:
        return True

    if profile.media is None:
        logger.warning("Cannot negotiate profile %s: no media element", profile.id)
        return False

    with profile_context(profile.id, profile.client):
        decisions = negotiate(profile.media, profile.capabilities)
        if decisions is None:
            logger.warning("Negotiation failed for %s", profile.media.path)
            return False

        profile.decisions = decisions
        logger.info(
            "Negotiated %s: quality=%d format=%s video=%s",
            profile.media.path,
            decisions.quality,
            decisions.format,
            decisions.video.codec if decisions.video else None,
        )

    return True

"""Audio stream negotiation.

Decides per source audio stream whether it can be copied, and if not
which codec, sample rate, quality and channel policy to transcode with.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sms_transcode.core.codecs import (
    DEFAULT_MAX_SAMPLE_RATE,
    LOSSLESS_CODECS,
    TRANSCODE_AUDIO_CODECS,
    get_codecs_for_format,
    get_encoder_for_audio_codec,
    get_format_for_audio_codec,
    get_max_sample_rate_for_codec,
    is_sample_rate_exempt,
    is_supported,
    sort_codecs,
)
from sms_transcode.core.quality import (
    AUDIO_QUALITY_MAX_SAMPLE_RATE,
    VIDEO_QUALITY_AUDIO_QUALITY,
    get_audio_channel_count,
    get_audio_max_bitrate,
    get_audio_quality_for_codec,
    is_valid_audio_quality,
    is_valid_video_quality,
)
from sms_transcode.domain.enums import AudioQuality, MediaElementType
from sms_transcode.domain.models import COPY, AudioStream, AudioTranscode, MediaElement
from sms_transcode.domain.schemas import CapabilityProfile
from sms_transcode.negotiation.types import (
    AudioNegotiation,
    TranscodeReason,
    TranscodeReasonCode,
)

logger = logging.getLogger(__name__)


def get_max_sample_rate(
    media: MediaElement, capabilities: CapabilityProfile, quality: int
) -> int:
    """Get the sample rate ceiling for a profile.

    An explicit ceiling from the client wins. Otherwise audio items use the
    ceiling of their audio quality and video items the default rate.
    """
    if capabilities.max_sample_rate is not None:
        return capabilities.max_sample_rate
    if media.type is MediaElementType.AUDIO:
        return AUDIO_QUALITY_MAX_SAMPLE_RATE[quality]
    return DEFAULT_MAX_SAMPLE_RATE


def audio_transcode_reasons(
    media: MediaElement,
    capabilities: CapabilityProfile,
    stream: AudioStream,
    quality: int,
    max_sample_rate: int,
    codecs: Sequence[str] | None = None,
    mch_codecs: Sequence[str] | None = None,
) -> tuple[TranscodeReason, ...]:
    """Collect the reasons an audio stream cannot be copied.

    Container compatibility is not checked here.

    Args:
        media: Source media element.
        capabilities: Client capability profile.
        stream: Audio stream to check.
        quality: Audio quality for audio items (tier index of the bitrate
            ceiling); ignored for video items.
        max_sample_rate: Sample rate ceiling in Hz.
        codecs: Acceptable codecs, defaults to the profile list.
        mch_codecs: Acceptable multichannel codecs, defaults to the
            profile list.

    Returns:
        Reasons for transcoding; empty if the stream can be copied.
    """
    if codecs is None:
        codecs = capabilities.codecs
    if mch_codecs is None:
        mch_codecs = capabilities.mch_codecs

    reasons: list[TranscodeReason] = []
    channels = get_audio_channel_count(stream.configuration)

    if channels > 2:
        if not is_supported(mch_codecs, stream.codec):
            reasons.append(
                TranscodeReason(
                    TranscodeReasonCode.MULTICHANNEL_UNSUPPORTED,
                    f"{stream.codec} with {channels} channels",
                )
            )
    elif not is_supported(codecs, stream.codec):
        reasons.append(
            TranscodeReason(TranscodeReasonCode.CODEC_UNSUPPORTED, stream.codec)
        )

    if stream.sample_rate > max_sample_rate and not is_sample_rate_exempt(stream.codec):
        reasons.append(
            TranscodeReason(
                TranscodeReasonCode.SAMPLE_RATE_EXCEEDED,
                f"{stream.sample_rate} > {max_sample_rate} Hz",
            )
        )

    if not capabilities.direct_play and media.type is MediaElementType.AUDIO:
        max_bitrate = get_audio_max_bitrate(quality, channels)
        if max_bitrate > 0 and media.bitrate > max_bitrate:
            reasons.append(
                TranscodeReason(
                    TranscodeReasonCode.BITRATE_EXCEEDED,
                    f"{media.bitrate} > {max_bitrate} kb/s",
                )
            )

    return tuple(reasons)


def _find_codec(candidates: Sequence[str] | None, format: str | None) -> str | None:
    """First transcodable candidate the container can carry."""
    if candidates is None:
        return None
    for candidate in candidates:
        if not is_supported(TRANSCODE_AUDIO_CODECS, candidate):
            continue
        if format is None or is_supported(get_codecs_for_format(format), candidate):
            return candidate
    return None


def negotiate_audio(
    media: MediaElement | None,
    capabilities: CapabilityProfile,
    quality: int | None = None,
    format: str | None = None,
) -> AudioNegotiation | None:
    """Negotiate every audio stream of a media element.

    Args:
        media: Source media element.
        capabilities: Client capability profile.
        quality: Quality to negotiate at; defaults to the profile quality.
            For video items this is the negotiated video quality.
        format: Container format; defaults to the profile format. When
            unset for an audio item it is inferred from the first stream.

    Returns:
        AudioNegotiation with one decision per stream, or None if required
        input is missing or a stream has no viable codec.
    """
    if quality is None:
        quality = capabilities.quality
    if format is None:
        format = capabilities.format

    if media is None or capabilities.codecs is None or quality is None:
        logger.warning("Cannot negotiate audio: incomplete capability profile")
        return None

    audio_track = capabilities.audio_track

    if not media.audio_streams:
        return AudioNegotiation(transcodes=(), format=format, audio_track=audio_track)

    if audio_track is None:
        audio_track = 0

    if media.type is MediaElementType.VIDEO:
        if format is None:
            logger.warning("Cannot negotiate audio: no format for video element")
            return None
        if not is_valid_video_quality(quality):
            logger.warning("Cannot negotiate audio: invalid video quality %s", quality)
            return None
    elif not is_valid_audio_quality(quality):
        logger.warning("Cannot negotiate audio: invalid audio quality %s", quality)
        return None

    max_sample_rate = get_max_sample_rate(media, capabilities, quality)

    # Lossless-first reordering carries over to the streams that follow
    codecs: Sequence[str] = capabilities.codecs
    mch_codecs: Sequence[str] | None = capabilities.mch_codecs

    transcodes: list[AudioTranscode] = []
    all_reasons: list[tuple[TranscodeReason, ...]] = []

    for position, stream in enumerate(media.audio_streams):
        reasons = list(
            audio_transcode_reasons(
                media,
                capabilities,
                stream,
                quality,
                max_sample_rate,
                codecs,
                mch_codecs,
            )
        )

        if not reasons:
            if format is not None:
                if not is_supported(get_codecs_for_format(format), stream.codec):
                    reasons.append(
                        TranscodeReason(
                            TranscodeReasonCode.CONTAINER_UNSUPPORTED,
                            f"{stream.codec} in {format}",
                        )
                    )
            elif not is_supported(TRANSCODE_AUDIO_CODECS, stream.codec):
                reasons.append(
                    TranscodeReason(
                        TranscodeReasonCode.CODEC_NOT_STREAMABLE, stream.codec
                    )
                )

        all_reasons.append(tuple(reasons))

        if not reasons:
            if format is None:
                format = get_format_for_audio_codec(stream.codec)
            transcodes.append(AudioTranscode(COPY))
            continue

        logger.debug(
            "Audio stream %d transcode needed: %s",
            position,
            ", ".join(map(str, reasons)),
        )

        if (
            media.type is MediaElementType.AUDIO
            and (quality == AudioQuality.LOSSLESS or capabilities.direct_play)
            and is_supported(LOSSLESS_CODECS, stream.codec)
        ):
            codecs = sort_codecs(codecs, LOSSLESS_CODECS)
            if mch_codecs is not None:
                mch_codecs = sort_codecs(mch_codecs, LOSSLESS_CODECS)

        codec = None
        downmix = False

        if get_audio_channel_count(stream.configuration) > 2:
            codec = _find_codec(mch_codecs, format)
            if codec is None:
                logger.debug(
                    "No multichannel codec for stream %d, downmixing", position
                )
                downmix = True

        if codec is None:
            codec = _find_codec(codecs, format)

        if codec is None:
            logger.warning(
                "No transcodable audio codec in %s for format %s",
                list(codecs),
                format,
            )
            return None

        sample_rate = None
        rate_ceiling = min(max_sample_rate, get_max_sample_rate_for_codec(codec))
        if stream.sample_rate > rate_ceiling:
            sample_rate = rate_ceiling

        codec_quality = None
        if media.type is MediaElementType.AUDIO:
            codec_quality = get_audio_quality_for_codec(codec, quality)
        elif media.type is MediaElementType.VIDEO:
            codec_quality = get_audio_quality_for_codec(
                codec, VIDEO_QUALITY_AUDIO_QUALITY[quality]
            )

        if format is None:
            format = get_format_for_audio_codec(codec)

        encoder = get_encoder_for_audio_codec(codec)
        logger.debug(
            "Audio stream %d transcode target: %s "
            "(quality=%s, sample_rate=%s, downmix=%s)",
            position,
            encoder,
            codec_quality,
            sample_rate,
            downmix,
        )

        transcodes.append(
            AudioTranscode(
                codec=encoder,
                quality=codec_quality,
                sample_rate=sample_rate,
                downmix=downmix,
            )
        )

    return AudioNegotiation(
        transcodes=tuple(transcodes),
        format=format,
        audio_track=audio_track,
        reasons=tuple(all_reasons),
    )

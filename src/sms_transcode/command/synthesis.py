"""Command synthesis.

Turns a negotiated TranscodeProfile into transcoder command variants.

Variants are ordered for fallback: when the video stream is re-encoded,
one variant per hardware accelerator (in the transcoder's preference
order) is followed by a software-only variant. Otherwise a single
software variant is produced. Callers run variants in order and keep the
first that succeeds.
"""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import UUID

from sms_transcode.command.builder import CommandBuilder
from sms_transcode.command.encoders import (
    audio_args,
    hardware_decode_args,
    hardware_encode_args,
    software_encode_args,
    subtitle_overlay_args,
)
from sms_transcode.command.tokens import CommandVariant, Option, Output, Token
from sms_transcode.config.models import StreamingConfig
from sms_transcode.core.codecs import TEXT_SUBTITLE_TARGET, get_format_for_audio_codec
from sms_transcode.core.quality import get_video_resolution, is_valid_video_quality
from sms_transcode.domain.enums import SegmentType
from sms_transcode.domain.models import TranscodeProfile
from sms_transcode.logging.context import profile_context
from sms_transcode.tools.models import HardwareAccelerator, Transcoder

logger = logging.getLogger(__name__)

SEGMENT_LIST_NAME = "segments.txt"
MANIFEST_NAME = "playlist.mpd"

# Container for corrected video and audio segments
SEGMENT_FORMAT = "mpegts"

# Clients that need audio segments in the container of their audio codec
CODEC_CONTAINER_CLIENTS: frozenset[str] = frozenset({"chromecast"})


# =============================================================================
# Output Paths
# =============================================================================


def get_stream_directory(settings: StreamingConfig, profile_id: UUID) -> Path:
    """Directory holding the output of one profile."""
    return settings.cache_directory / "streams" / str(profile_id)


def get_segment_output_path(
    settings: StreamingConfig,
    profile_id: UUID,
    segment: str,
    segment_type: SegmentType,
    extra: int,
) -> Path:
    """Path of a corrected segment: ``<segment>-<type>-<index>``."""
    return get_stream_directory(settings, profile_id) / (
        f"{segment}-{segment_type.value}-{extra}"
    )


def variant_accelerators(
    transcoder: Transcoder, converts_video: bool
) -> list[HardwareAccelerator | None]:
    """Accelerator of each variant, in fallback order.

    None stands for the software-only variant, which is always last.
    """
    if not converts_video:
        return [None]
    return [*transcoder.hardware_accelerators, None]


# =============================================================================
# Full File Commands
# =============================================================================


def format_args(profile: TranscodeProfile, settings: StreamingConfig) -> list[Token]:
    """Build container and output arguments for the negotiated format.

    HLS output is split into numbered segments with a flat segment list,
    DASH writes a manifest, and any other format is piped to stdout.
    No format means no output arguments.
    """
    decisions = profile.decisions
    if decisions is None or decisions.format is None:
        return []

    directory = get_stream_directory(settings, profile.id)

    if decisions.format == "hls":
        duration = settings.segment_duration
        tokens: list[Token] = [
            Option("-f", "segment"),
            Option("-segment_time", str(duration)),
            Option(
                "-segment_format", "mpegts" if decisions.video is None else "matroska"
            ),
        ]

        # Resume numbering where playback was started
        if profile.offset > 0:
            tokens.extend(
                [
                    Option("-segment_start_number", str(profile.offset // duration)),
                    Option("-initial_offset", str(profile.offset)),
                ]
            )

        tokens.extend(
            [
                Option("-segment_list", str(directory / SEGMENT_LIST_NAME)),
                Option("-segment_list_type", "flat"),
                Output(str(directory / "%d")),
            ]
        )
        return tokens

    if decisions.format == "dash":
        tokens = []
        if decisions.video is not None:
            tokens.append(Option("-flags", "-global_header"))
        tokens.extend([Option("-f", "dash"), Output(str(directory / MANIFEST_NAME))])
        return tokens

    return [Option("-f", decisions.format), Output("-")]


def _build_transcode_variant(
    profile: TranscodeProfile,
    transcoder: Transcoder,
    settings: StreamingConfig,
    accelerator: HardwareAccelerator | None,
) -> CommandVariant:
    decisions = profile.decisions
    assert decisions is not None

    builder = CommandBuilder(
        str(transcoder.path),
        accelerator=accelerator.name if accelerator is not None else None,
    )
    builder.option("-ss", profile.offset)

    input_added = False

    video = decisions.video
    if video is not None:
        if accelerator is not None:
            builder.extend(hardware_decode_args(accelerator))

        builder.option("-i", profile.media.path)
        input_added = True

        for index in range(len(decisions.subtitles or ())):
            builder.option("-map", f"0:s:{index}").option("-c:s", "copy")

        builder.option("-map", "0:v")

        if accelerator is None:
            builder.extend(software_encode_args(video.codec, video.resolution))
        else:
            builder.extend(hardware_encode_args(video.resolution, accelerator))

    if decisions.audio:
        if not input_added:
            builder.option("-i", profile.media.path)

        # Enable experimental encoders
        builder.option("-strict", "experimental")

        for track, transcode in enumerate(decisions.audio):
            builder.extend(audio_args(track, transcode))

    builder.extend(format_args(profile, settings))
    return builder.build()


def build_transcode_commands(
    profile: TranscodeProfile,
    transcoder: Transcoder,
    settings: StreamingConfig,
) -> list[CommandVariant] | None:
    """Build the full file transcode command variants for a profile.

    Args:
        profile: Negotiated transcode profile.
        transcoder: Backend descriptor.
        settings: Streaming settings (cache root, segment duration).

    Returns:
        Variants in fallback order, or None if the profile has not been
        negotiated.
    """
    decisions = profile.decisions
    if decisions is None:
        logger.warning("Cannot build commands for un-negotiated profile %s", profile.id)
        return None

    with profile_context(profile.id, profile.client):
        variants = [
            _build_transcode_variant(profile, transcoder, settings, accelerator)
            for accelerator in variant_accelerators(
                transcoder, decisions.requires_video_conversion
            )
        ]
        logger.debug("Built %d transcode command variant(s)", len(variants))

    return variants


# =============================================================================
# Segment Correction Commands
# =============================================================================


def _parse_segment_type(stream_type: SegmentType | str | None) -> SegmentType | None:
    if stream_type is None or isinstance(stream_type, SegmentType):
        return stream_type
    try:
        return SegmentType(stream_type.lower())
    except ValueError:
        return None


def _video_segment_variant(
    builder: CommandBuilder,
    profile: TranscodeProfile,
    segment_path: Path,
    accelerator: HardwareAccelerator | None,
    reencode: bool,
    extra: int,
) -> None:
    decisions = profile.decisions
    assert decisions is not None

    resolution = None
    if extra != decisions.quality:
        stream = profile.media.video_stream
        width, height = (stream.width, stream.height) if stream else (0, 0)
        resolution = get_video_resolution(width, height, extra)

    if accelerator is not None and reencode:
        builder.extend(hardware_decode_args(accelerator))

    builder.option("-i", segment_path)

    if decisions.video is None:
        return

    builder.extend(subtitle_overlay_args(decisions))

    if not reencode:
        builder.option("-c:v", "copy")
    elif accelerator is not None:
        builder.extend(hardware_encode_args(resolution, accelerator))
    else:
        builder.extend(software_encode_args("h264", resolution))

    builder.option("-f", SEGMENT_FORMAT)


def _audio_segment_variant(
    builder: CommandBuilder,
    profile: TranscodeProfile,
    segment_path: Path,
    extra: int,
) -> None:
    decisions = profile.decisions
    assert decisions is not None

    builder.option("-i", segment_path)

    audio = decisions.audio or ()
    in_range = 0 <= extra < len(audio)
    if in_range:
        builder.option("-map", f"0:a:{extra}").option("-c:a", "copy")

    container = SEGMENT_FORMAT
    if profile.client in CODEC_CONTAINER_CLIENTS and in_range:
        codec = audio[extra].codec
        if audio[extra].is_copy and extra < len(profile.media.audio_streams):
            codec = profile.media.audio_streams[extra].codec
        container = get_format_for_audio_codec(codec) or SEGMENT_FORMAT

    builder.option("-f", container)


def _subtitle_segment_variant(
    builder: CommandBuilder,
    profile: TranscodeProfile,
    segment_path: Path,
    extra: int,
) -> None:
    decisions = profile.decisions
    assert decisions is not None

    builder.option("-i", segment_path)

    if 0 <= extra < len(decisions.subtitles or ()):
        builder.option("-map", f"0:s:{extra}").option("-c:s", TEXT_SUBTITLE_TARGET)

    builder.option("-f", TEXT_SUBTITLE_TARGET)


def segment_requires_reencode(profile: TranscodeProfile, quality: int) -> bool:
    """Check whether a video segment must be re-encoded.

    Re-encoding is needed when a different quality than the negotiated one
    is requested, or when the selected subtitle is burned in.
    """
    decisions = profile.decisions
    if decisions is None:
        return False
    if quality != decisions.quality:
        return True
    selected = decisions.selected_subtitle()
    return selected is not None and selected.hardcoded


def build_segment_commands(
    segment: str | None,
    profile: TranscodeProfile | None,
    stream_type: SegmentType | str | None,
    extra: int | None,
    transcoder: Transcoder,
    settings: StreamingConfig,
) -> list[CommandVariant] | None:
    """Build command variants that correct an intermediate segment.

    Args:
        segment: Name of the segment file in the profile's stream directory.
        profile: Negotiated transcode profile.
        stream_type: Segment type tag (video, audio or subtitle).
        extra: Requested video quality for video segments, track index
            for audio and subtitle segments.
        transcoder: Backend descriptor.
        settings: Streaming settings (cache root).

    Returns:
        Variants in fallback order, or None when the request is incomplete
        and there is nothing to do.
    """
    segment_type = _parse_segment_type(stream_type)
    if segment is None or profile is None or segment_type is None or extra is None:
        return None

    if profile.decisions is None:
        logger.warning("Cannot correct segment of un-negotiated profile %s", profile.id)
        return None

    if segment_type is SegmentType.VIDEO and not is_valid_video_quality(extra):
        logger.warning("Invalid video quality %s for segment %s", extra, segment)
        return None

    segment_path = get_stream_directory(settings, profile.id) / segment
    output = get_segment_output_path(settings, profile.id, segment, segment_type, extra)

    reencode = segment_type is SegmentType.VIDEO and segment_requires_reencode(
        profile, extra
    )

    variants: list[CommandVariant] = []

    with profile_context(profile.id, profile.client):
        for accelerator in variant_accelerators(transcoder, reencode):
            builder = CommandBuilder(
                str(transcoder.path),
                accelerator=accelerator.name if accelerator is not None else None,
            )

            if segment_type is SegmentType.VIDEO:
                _video_segment_variant(
                    builder, profile, segment_path, accelerator, reencode, extra
                )
            elif segment_type is SegmentType.AUDIO:
                _audio_segment_variant(builder, profile, segment_path, extra)
            else:
                _subtitle_segment_variant(builder, profile, segment_path, extra)

            # Keep source timestamps so corrected segments stay aligned
            builder.option("-copyts")
            builder.output(output)
            variants.append(builder.build())

        logger.debug(
            "Built %d %s segment command variant(s) for %s",
            len(variants),
            segment_type.value,
            segment,
        )

    return variants

"""Quality tier tables and stream parameter helpers.

Video tiers bound bitrate and resolution; audio tiers bound per-channel
bitrate and sample rate. Tier indices are the integer values of
VideoQuality and AudioQuality.
"""

from __future__ import annotations

import re

from sms_transcode.core.codecs import normalize_codec
from sms_transcode.domain.enums import AudioQuality, VideoQuality
from sms_transcode.domain.models import Resolution

# =============================================================================
# Video Tiers
# =============================================================================

# Max bitrate per video quality in kb/s
VIDEO_QUALITY_MAX_BITRATE: tuple[int, ...] = (500, 1000, 2000, 4000, 8000, 20000)

VIDEO_QUALITY_RESOLUTION: tuple[Resolution, ...] = (
    Resolution(426, 240),
    Resolution(640, 360),
    Resolution(854, 480),
    Resolution(1280, 720),
    Resolution(1920, 1080),
    Resolution(3840, 2160),
)

# Audio quality used for the audio streams of a video at each video quality
VIDEO_QUALITY_AUDIO_QUALITY: tuple[AudioQuality, ...] = (
    AudioQuality.LOW,
    AudioQuality.LOW,
    AudioQuality.MEDIUM,
    AudioQuality.MEDIUM,
    AudioQuality.HIGH,
    AudioQuality.HIGH,
)


# =============================================================================
# Audio Tiers
# =============================================================================

# Max bitrate per channel for each audio quality in kb/s (-1 = unlimited)
AUDIO_QUALITY_MAX_BITRATE: tuple[int, ...] = (48, 96, 160, -1)

AUDIO_QUALITY_MAX_SAMPLE_RATE: tuple[int, ...] = (44100, 44100, 48000, 192000)

# VBR quality parameter (-q:a) per audio quality, for codecs that take one.
# libmp3lame: 0 (best) to 9, libvorbis: 0 to 10 (best).
AUDIO_CODEC_QUALITY: dict[str, tuple[int, ...]] = {
    "mp3": (6, 4, 2, 0),
    "vorbis": (3, 5, 8, 10),
}

CHANNEL_LAYOUTS: dict[str, int] = {
    "mono": 1,
    "stereo": 2,
    "quad": 4,
    "hexagonal": 6,
    "octagonal": 8,
}


def is_valid_video_quality(quality: int | None) -> bool:
    return quality is not None and 0 <= quality <= max(VideoQuality)


def is_valid_audio_quality(quality: int | None) -> bool:
    return quality is not None and 0 <= quality <= max(AudioQuality)


# =============================================================================
# Resolution Helpers
# =============================================================================


def compare_dimensions(source: Resolution, target: Resolution) -> int:
    """Compare two resolutions.

    Returns:
        1 if either source dimension exceeds the target, 0 if equal,
        -1 otherwise.
    """
    if source.width > target.width or source.height > target.height:
        return 1
    if source == target:
        return 0
    return -1


def get_highest_video_quality(
    width: int, height: int, bitrate: int = 0
) -> VideoQuality | None:
    """Get the highest video quality a source stream qualifies for.

    A source qualifies for a tier when either dimension reaches the tier
    resolution. Sources without dimensions fall back to bitrate.

    Returns:
        Highest qualifying tier, or None if the source carries no
        dimensions and no bitrate.
    """
    if width > 0 and height > 0:
        for quality in reversed(VideoQuality):
            tier = VIDEO_QUALITY_RESOLUTION[quality]
            if width >= tier.width or height >= tier.height:
                return quality
        return VideoQuality.VERY_LOW

    if bitrate > 0:
        for quality in reversed(VideoQuality):
            if bitrate >= VIDEO_QUALITY_MAX_BITRATE[quality]:
                return quality
        return VideoQuality.VERY_LOW

    return None


def get_video_resolution(width: int, height: int, quality: int) -> Resolution | None:
    """Get the target resolution for a source at a given video quality.

    The source is scaled down to fit the tier resolution with its aspect
    ratio preserved. Sources already within the tier are never scaled up.

    Returns:
        Target resolution with even dimensions, the tier resolution if the
        source dimensions are unknown, or None if no scaling is needed.
    """
    tier = VIDEO_QUALITY_RESOLUTION[quality]

    if width <= 0 or height <= 0:
        return tier

    if compare_dimensions(Resolution(width, height), tier) != 1:
        return None

    # Scale by whichever dimension is the tighter fit
    if width * tier.height >= height * tier.width:
        target_width = tier.width
        target_height = height * tier.width // width
    else:
        target_height = tier.height
        target_width = width * tier.height // height

    # Most encoders require even dimensions
    target_width -= target_width % 2
    target_height -= target_height % 2

    return Resolution(target_width, target_height)


# =============================================================================
# Audio Helpers
# =============================================================================


def get_audio_channel_count(configuration: str | None) -> int:
    """Get the channel count for a channel layout description.

    Handles named layouts ("mono", "stereo"), speaker notation ("5.1",
    "7.1(wide)") and explicit counts ("6 channels").

    Returns:
        Channel count, or 0 if the layout is unknown.
    """
    if not configuration:
        return 0

    layout = configuration.casefold().strip()
    if layout in CHANNEL_LAYOUTS:
        return CHANNEL_LAYOUTS[layout]

    match = re.match(r"(\d+)\.(\d+)", layout)
    if match:
        return int(match.group(1)) + int(match.group(2))

    match = re.match(r"(\d+)\s*(?:channels?|ch)\b", layout)
    if match:
        return int(match.group(1))

    return 0


def get_audio_quality_for_codec(codec: str, quality: int) -> int | None:
    """Get the VBR quality parameter for a codec at an audio quality.

    Returns:
        Quality value for -q:a, or None if the codec takes no VBR quality.
    """
    values = AUDIO_CODEC_QUALITY.get(normalize_codec(codec))
    if values is None:
        return None
    return values[min(quality, len(values) - 1)]


def get_audio_max_bitrate(quality: int, channels: int) -> int:
    """Get the bitrate ceiling for an audio stream at an audio quality.

    Returns:
        Ceiling in kb/s; zero or negative means unlimited.
    """
    return channels * AUDIO_QUALITY_MAX_BITRATE[quality]

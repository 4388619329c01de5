"""Centralized codec registry and utilities.

This module is the single source of truth for codec knowledge used by the
negotiator and the command synthesizer:
- Codec alias groups for matching/normalization
- Supported, transcodable and lossless codec lists
- Container (format) compatibility lists
- Codec to container and codec to encoder mappings
- Per-codec sample rate ceilings
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

# =============================================================================
# Codec Aliases
# =============================================================================
# Probe output and client profiles do not always agree on codec names.

CODEC_ALIASES: dict[str, str] = {
    "avc": "h264",
    "avc1": "h264",
    "h265": "hevc",
    "hvc1": "hevc",
    "hev1": "hevc",
    "dca": "dts",
    "mp3float": "mp3",
    "srt": "subrip",
    "ssa": "ass",
    "dvdsub": "dvd_subtitle",
    "pgssub": "hdmv_pgs_subtitle",
}

# Codec families whose concrete variants carry a suffix, e.g. pcm_s16le.
CODEC_FAMILIES: tuple[str, ...] = ("pcm", "dsd")


# =============================================================================
# Codec Lists
# =============================================================================

SUPPORTED_VIDEO_CODECS: tuple[str, ...] = (
    "h264",
    "hevc",
    "mpeg2video",
    "mpeg4",
    "vc1",
    "vp8",
    "vp9",
    "av1",
)

SUPPORTED_AUDIO_CODECS: tuple[str, ...] = (
    "aac",
    "ac3",
    "alac",
    "dsd",
    "dts",
    "eac3",
    "flac",
    "mp2",
    "mp3",
    "opus",
    "pcm",
    "truehd",
    "vorbis",
)

SUPPORTED_SUBTITLE_CODECS: tuple[str, ...] = (
    "subrip",
    "webvtt",
    "ass",
    "mov_text",
    "dvb_subtitle",
    "dvd_subtitle",
    "hdmv_pgs_subtitle",
)

TRANSCODE_VIDEO_CODECS: tuple[str, ...] = ("h264", "vp8")

TRANSCODE_AUDIO_CODECS: tuple[str, ...] = (
    "aac",
    "ac3",
    "eac3",
    "flac",
    "mp3",
    "opus",
    "pcm",
    "vorbis",
)

LOSSLESS_CODECS: tuple[str, ...] = ("alac", "dsd", "flac", "pcm", "truehd")

TEXT_SUBTITLE_CODECS: tuple[str, ...] = ("subrip", "webvtt")

PICTURE_SUBTITLE_CODECS: tuple[str, ...] = (
    "dvb_subtitle",
    "dvd_subtitle",
    "hdmv_pgs_subtitle",
)

# Universal text subtitle codec for side-channel delivery
TEXT_SUBTITLE_TARGET = "webvtt"

# Sample rates above the profile limit are tolerated for bit-exact DSD streams
SAMPLE_RATE_EXEMPT_CODECS: tuple[str, ...] = ("dsd",)


# =============================================================================
# Container Compatibility
# =============================================================================

FORMAT_CODECS: dict[str, tuple[str, ...]] = {
    "hls": ("h264", "hevc", "aac", "ac3", "eac3", "mp3", "webvtt"),
    "dash": ("h264", "hevc", "vp9", "av1", "aac", "ac3", "eac3", "opus", "webvtt"),
    "matroska": SUPPORTED_VIDEO_CODECS
    + SUPPORTED_AUDIO_CODECS
    + SUPPORTED_SUBTITLE_CODECS,
    "webm": ("vp8", "vp9", "av1", "vorbis", "opus", "webvtt"),
    "mp4": (
        "h264",
        "hevc",
        "av1",
        "mpeg4",
        "aac",
        "ac3",
        "eac3",
        "mp3",
        "alac",
        "flac",
        "opus",
        "mov_text",
    ),
    "mpegts": (
        "h264",
        "hevc",
        "mpeg2video",
        "aac",
        "ac3",
        "eac3",
        "mp2",
        "mp3",
        "dvb_subtitle",
    ),
    # Audio only containers
    "adts": ("aac",),
    "ac3": ("ac3",),
    "eac3": ("eac3",),
    "flac": ("flac",),
    "ipod": ("aac", "alac"),
    "mp3": ("mp3",),
    "oga": ("flac", "opus", "vorbis"),
    "wav": ("pcm",),
}

# Default container when streaming a single audio codec
AUDIO_CODEC_FORMATS: dict[str, str] = {
    "aac": "adts",
    "ac3": "ac3",
    "alac": "ipod",
    "eac3": "eac3",
    "flac": "flac",
    "mp3": "mp3",
    "opus": "oga",
    "pcm": "wav",
    "vorbis": "oga",
}

AUDIO_ENCODERS: dict[str, str] = {
    "aac": "aac",
    "ac3": "ac3",
    "eac3": "eac3",
    "flac": "flac",
    "mp3": "libmp3lame",
    "opus": "libopus",
    "pcm": "pcm_s16le",
    "vorbis": "libvorbis",
}

AUDIO_CODEC_MAX_SAMPLE_RATE: dict[str, int] = {
    "aac": 96000,
    "ac3": 48000,
    "eac3": 48000,
    "flac": 192000,
    "mp3": 48000,
    "opus": 48000,
    "pcm": 192000,
    "vorbis": 192000,
}

DEFAULT_MAX_SAMPLE_RATE = 48000

# Encoders the synthesizer emits; a transcoder without them is degraded
REQUIRED_ENCODERS: tuple[str, ...] = (
    "libx264",
    "libvpx",
    "aac",
    "ac3",
    "flac",
    "libmp3lame",
    "libvorbis",
)


# =============================================================================
# Normalization and Matching
# =============================================================================


def normalize_codec(codec: str | None) -> str:
    """Normalize a codec name for comparison.

    Args:
        codec: Codec name from the scanner or a client profile.

    Returns:
        Lowercase canonical codec name, or empty string for None.
    """
    if codec is None:
        return ""
    normalized = codec.casefold().strip()
    normalized = CODEC_ALIASES.get(normalized, normalized)

    for family in CODEC_FAMILIES:
        if normalized.startswith(f"{family}_"):
            return family

    return normalized


def is_supported(codecs: Iterable[str] | None, codec: str | None) -> bool:
    """Check whether a codec appears in a codec list (alias-aware).

    Args:
        codecs: Candidate codec list, may be None.
        codec: Codec to look up.

    Returns:
        True if the normalized codec is present in the list.
    """
    if codecs is None or not codec:
        return False
    target = normalize_codec(codec)
    return any(normalize_codec(candidate) == target for candidate in codecs)


def sort_codecs(codecs: Sequence[str], preferred: Iterable[str]) -> tuple[str, ...]:
    """Reorder a codec list so preferred codecs come first.

    The relative order inside both partitions is preserved.
    """
    preferred = tuple(preferred)
    first = [c for c in codecs if is_supported(preferred, c)]
    rest = [c for c in codecs if not is_supported(preferred, c)]
    return tuple(first + rest)


# =============================================================================
# Container and Encoder Lookups
# =============================================================================


def get_codecs_for_format(format: str | None) -> tuple[str, ...]:
    """Get the codecs a container format can carry.

    Unknown formats carry nothing.
    """
    if not format:
        return ()
    return FORMAT_CODECS.get(format.casefold(), ())


def is_codec_compatible(codec: str | None, format: str | None) -> bool:
    """Check if a codec can be carried by a container format."""
    return is_supported(get_codecs_for_format(format), codec)


def get_format_for_audio_codec(codec: str | None) -> str | None:
    """Get the default streaming container for an audio codec or encoder."""
    normalized = normalize_codec(codec)
    if normalized in AUDIO_CODEC_FORMATS:
        return AUDIO_CODEC_FORMATS[normalized]

    for logical, encoder in AUDIO_ENCODERS.items():
        if encoder == normalized:
            return AUDIO_CODEC_FORMATS.get(logical)

    return None


def get_encoder_for_audio_codec(codec: str) -> str:
    """Get the transcoder encoder name for a logical audio codec."""
    normalized = normalize_codec(codec)
    return AUDIO_ENCODERS.get(normalized, normalized)


def get_max_sample_rate_for_codec(codec: str) -> int:
    """Get the highest sample rate an audio codec can encode."""
    return AUDIO_CODEC_MAX_SAMPLE_RATE.get(
        normalize_codec(codec), DEFAULT_MAX_SAMPLE_RATE
    )


def is_sample_rate_exempt(codec: str | None) -> bool:
    """True for bit-exact formats allowed above the profile sample rate."""
    normalized = normalize_codec(codec)
    return any(family in normalized for family in SAMPLE_RATE_EXEMPT_CODECS)


def get_supported_codecs() -> tuple[str, ...]:
    """All codecs the server can play back in some form."""
    return SUPPORTED_VIDEO_CODECS + SUPPORTED_AUDIO_CODECS + SUPPORTED_SUBTITLE_CODECS


def get_transcode_codecs() -> tuple[str, ...]:
    """All codecs the server can produce by transcoding."""
    return TRANSCODE_VIDEO_CODECS + TRANSCODE_AUDIO_CODECS

"""Stream descriptor catalog: codec tables, quality tiers and lookups."""

from sms_transcode.core.codecs import (
    LOSSLESS_CODECS,
    SUPPORTED_AUDIO_CODECS,
    SUPPORTED_SUBTITLE_CODECS,
    SUPPORTED_VIDEO_CODECS,
    TRANSCODE_AUDIO_CODECS,
    TRANSCODE_VIDEO_CODECS,
    get_codecs_for_format,
    get_encoder_for_audio_codec,
    get_format_for_audio_codec,
    get_max_sample_rate_for_codec,
    get_supported_codecs,
    get_transcode_codecs,
    is_codec_compatible,
    is_supported,
    normalize_codec,
    sort_codecs,
)
from sms_transcode.core.quality import (
    AUDIO_QUALITY_MAX_BITRATE,
    VIDEO_QUALITY_AUDIO_QUALITY,
    VIDEO_QUALITY_MAX_BITRATE,
    VIDEO_QUALITY_RESOLUTION,
    compare_dimensions,
    get_audio_channel_count,
    get_audio_quality_for_codec,
    get_highest_video_quality,
    get_video_resolution,
)

__all__ = [
    # Codec lists
    "LOSSLESS_CODECS",
    "SUPPORTED_AUDIO_CODECS",
    "SUPPORTED_SUBTITLE_CODECS",
    "SUPPORTED_VIDEO_CODECS",
    "TRANSCODE_AUDIO_CODECS",
    "TRANSCODE_VIDEO_CODECS",
    # Codec lookups
    "get_codecs_for_format",
    "get_encoder_for_audio_codec",
    "get_format_for_audio_codec",
    "get_max_sample_rate_for_codec",
    "get_supported_codecs",
    "get_transcode_codecs",
    "is_codec_compatible",
    "is_supported",
    "normalize_codec",
    "sort_codecs",
    # Quality tiers
    "AUDIO_QUALITY_MAX_BITRATE",
    "VIDEO_QUALITY_AUDIO_QUALITY",
    "VIDEO_QUALITY_MAX_BITRATE",
    "VIDEO_QUALITY_RESOLUTION",
    "compare_dimensions",
    "get_audio_channel_count",
    "get_audio_quality_for_codec",
    "get_highest_video_quality",
    "get_video_resolution",
]

"""Domain enums shared by the negotiator, synthesizer and registry."""

from enum import Enum, IntEnum


class MediaElementType(Enum):
    """Kind of playable item produced by the library scanner."""

    AUDIO = "audio"
    VIDEO = "video"
    DIRECTORY = "directory"  # Aggregate of the items in a folder


class StreamType(Enum):
    """How a profile delivers its media element."""

    DIRECT = "direct"  # Static file served as-is
    FILE = "file"  # Download of the original file
    TRANSCODE = "transcode"  # Backed by an external transcoder process


class SegmentType(Enum):
    """Stream type tag of an adaptive streaming segment request."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


class VideoQuality(IntEnum):
    """Video quality tiers, ordered from lowest to highest."""

    VERY_LOW = 0  # 240p
    LOW = 1  # 360p
    MEDIUM = 2  # 480p
    HIGH = 3  # 720p
    VERY_HIGH = 4  # 1080p
    ULTRA = 5  # 2160p


class AudioQuality(IntEnum):
    """Audio quality tiers, ordered from lowest to highest."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    LOSSLESS = 3

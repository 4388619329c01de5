"""Shared test fixtures for sms_transcode."""

import logging
from pathlib import Path

import pytest

from sms_transcode.config import StreamingConfig, clear_config_cache
from sms_transcode.domain import (
    AudioStream,
    CapabilityProfile,
    MediaElement,
    MediaElementType,
    SubtitleStream,
    TranscodeProfile,
    VideoQuality,
    VideoStream,
)
from sms_transcode.logging import clear_profile_context
from sms_transcode.tools import HardwareAccelerator, Transcoder

VAAPI_DEVICE = Path("/dev/dri/renderD128")


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Reset cached config and logging context around every test."""
    clear_config_cache()
    clear_profile_context()
    yield
    clear_config_cache()
    clear_profile_context()


@pytest.fixture
def video_media() -> MediaElement:
    """1080p / 8 Mb/s H.264 movie with one stereo AAC track."""
    return MediaElement(
        path=Path("/media/movies/movie.mkv"),
        type=MediaElementType.VIDEO,
        bitrate=8000,
        video_stream=VideoStream("h264", 1920, 1080),
        audio_streams=(AudioStream("aac", 48000, "stereo"),),
    )


@pytest.fixture
def subtitled_media(video_media: MediaElement) -> MediaElement:
    """video_media with text, forced picture and unrecognized subtitles."""
    return MediaElement(
        path=video_media.path,
        type=video_media.type,
        bitrate=video_media.bitrate,
        video_stream=video_media.video_stream,
        audio_streams=video_media.audio_streams,
        subtitle_streams=(
            SubtitleStream("subrip", 0),
            SubtitleStream("hdmv_pgs_subtitle", 1, forced=True),
            SubtitleStream("ass", 2),
            SubtitleStream("eia_608", 3),
            SubtitleStream("webvtt", 4),
        ),
    )


@pytest.fixture
def flac_media() -> MediaElement:
    """Stereo FLAC track at CD quality."""
    return MediaElement(
        path=Path("/media/music/track.flac"),
        type=MediaElementType.AUDIO,
        bitrate=900,
        audio_streams=(AudioStream("flac", 44100, "stereo"),),
    )


@pytest.fixture
def capabilities() -> CapabilityProfile:
    """Browser requesting 720p HLS with H.264/AAC."""
    return CapabilityProfile(
        client="browser",
        quality=VideoQuality.HIGH,
        codecs=("h264", "aac", "mp3", "webvtt"),
        format="hls",
    )


@pytest.fixture
def vaapi_transcoder() -> Transcoder:
    """Transcoder with a single VAAPI accelerator."""
    return Transcoder(
        path=Path("/usr/bin/ffmpeg"),
        version="6.1.1",
        hardware_accelerators=(HardwareAccelerator("vaapi", VAAPI_DEVICE),),
    )


@pytest.fixture
def dual_transcoder() -> Transcoder:
    """Transcoder preferring VAAPI, then CUVID."""
    return Transcoder(
        path=Path("/usr/bin/ffmpeg"),
        hardware_accelerators=(
            HardwareAccelerator("vaapi", VAAPI_DEVICE),
            HardwareAccelerator("cuvid"),
        ),
    )


@pytest.fixture
def software_transcoder() -> Transcoder:
    """Transcoder without hardware acceleration."""
    return Transcoder(path=Path("/usr/bin/ffmpeg"))


@pytest.fixture
def streaming(tmp_path: Path) -> StreamingConfig:
    """Streaming settings rooted in a temporary cache directory."""
    return StreamingConfig(
        cache_directory=tmp_path / "cache",
        data_directory=tmp_path,
        segment_duration=10,
    )


@pytest.fixture
def make_profile():
    """Factory for TranscodeProfiles."""

    def _make(media: MediaElement, capabilities: CapabilityProfile, **kwargs):
        return TranscodeProfile(media=media, capabilities=capabilities, **kwargs)

    return _make


@pytest.fixture
def restore_root_logger():
    """Save and restore root logger state around code that configures logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield root
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers[:] = original_handlers
    root.setLevel(original_level)

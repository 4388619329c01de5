"""Unit tests for transcoder discovery."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from sms_transcode.config import HardwareConfig
from sms_transcode.exceptions import TranscoderNotFoundError
from sms_transcode.tools import (
    HardwareAccelerator,
    Transcoder,
    check_transcoder,
    detect_accelerators,
    detect_transcoder,
    require_transcoder,
)
from sms_transcode.tools.detection import (
    parse_encoders,
    parse_hwaccels,
    parse_version,
)

VERSION_OUTPUT = """ffmpeg version 6.1.1-3ubuntu5 Copyright (c) 2000-2023
built with gcc 13 (Ubuntu 13.2.0-23ubuntu3)
"""

HWACCELS_OUTPUT = """Hardware acceleration methods:
vdpau
cuda
vaapi
cuvid
"""

ENCODERS_OUTPUT = """Encoders:
 V..... = Video
 A..... = Audio
 ------
 V....D libx264              libx264 H.264 / AVC / MPEG-4 AVC (codec h264)
 V....D libvpx               libvpx VP8 (codec vp8)
 V....D h264_vaapi           H.264/AVC (VAAPI) (codec h264)
 A....D aac                  AAC (Advanced Audio Coding)
 A....D libmp3lame           libmp3lame MP3 (MPEG audio layer 3) (codec mp3)
"""


def _fake_run(responses: dict[str, tuple[str, str, int]]):
    """Build a _run_command replacement keyed by the last argument."""

    def run(args, timeout=10):
        return responses.get(args[-1], ("", "unknown option", 1))

    return run


# =============================================================================
# Output Parsing Tests
# =============================================================================


class TestParsing:
    """Tests for transcoder output parsing."""

    def test_version(self):
        """The version token follows 'ffmpeg version'."""
        assert parse_version(VERSION_OUTPUT) == "6.1.1-3ubuntu5"
        assert parse_version("garbage") is None

    def test_hwaccels(self):
        """The header line is skipped."""
        assert parse_hwaccels(HWACCELS_OUTPUT) == ["vdpau", "cuda", "vaapi", "cuvid"]

    def test_encoders(self):
        """Legend lines are skipped and names lowercased."""
        encoders = parse_encoders(ENCODERS_OUTPUT)
        assert encoders == frozenset(
            {"libx264", "libvpx", "h264_vaapi", "aac", "libmp3lame"}
        )


# =============================================================================
# Accelerator Detection Tests
# =============================================================================


class TestDetectAccelerators:
    """Tests for hardware accelerator enumeration."""

    def test_configured_order(self, tmp_path: Path):
        """Accelerators follow the configured preference order."""
        device = tmp_path / "renderD128"
        device.touch()
        hardware = HardwareConfig(accelerators=("cuvid", "vaapi"), vaapi_device=device)

        with patch(
            "sms_transcode.tools.detection._run_command",
            side_effect=_fake_run({"-hwaccels": (HWACCELS_OUTPUT, "", 0)}),
        ):
            accelerators = detect_accelerators(Path("/usr/bin/ffmpeg"), hardware)

        assert accelerators == (
            HardwareAccelerator("cuvid"),
            HardwareAccelerator("vaapi", device),
        )

    def test_missing_vaapi_device(self, tmp_path: Path):
        """VAAPI needs its render node."""
        hardware = HardwareConfig(vaapi_device=tmp_path / "missing")

        with patch(
            "sms_transcode.tools.detection._run_command",
            side_effect=_fake_run({"-hwaccels": (HWACCELS_OUTPUT, "", 0)}),
        ):
            accelerators = detect_accelerators(Path("/usr/bin/ffmpeg"), hardware)

        assert [a.name for a in accelerators] == ["cuvid"]

    def test_unsupported_by_binary(self, tmp_path: Path):
        """Accelerators the build lacks are skipped."""
        hardware = HardwareConfig(accelerators=("cuvid",))

        with patch(
            "sms_transcode.tools.detection._run_command",
            side_effect=_fake_run({"-hwaccels": ("Methods:\nvdpau\n", "", 0)}),
        ):
            assert detect_accelerators(Path("/usr/bin/ffmpeg"), hardware) == ()

    def test_disabled(self):
        """Disabled hardware acceleration skips detection entirely."""
        with patch("sms_transcode.tools.detection._run_command") as run:
            result = detect_accelerators(
                Path("/usr/bin/ffmpeg"), HardwareConfig(enabled=False)
            )

        assert result == ()
        run.assert_not_called()

    def test_listing_failure(self):
        """A failing listing means no accelerators."""
        with patch(
            "sms_transcode.tools.detection._run_command",
            return_value=("", "error", 1),
        ):
            assert detect_accelerators(Path("/usr/bin/ffmpeg"), HardwareConfig()) == ()


# =============================================================================
# Transcoder Detection Tests
# =============================================================================


class TestDetectTranscoder:
    """Tests for locating the transcoder."""

    @pytest.fixture
    def binary(self, tmp_path: Path) -> Path:
        path = tmp_path / "ffmpeg"
        path.touch()
        return path

    def test_configured_path(self, binary: Path):
        """A configured binary is used and described."""
        responses = {
            "-version": (VERSION_OUTPUT, "", 0),
            "-encoders": (ENCODERS_OUTPUT, "", 0),
            "-hwaccels": (HWACCELS_OUTPUT, "", 0),
        }
        hardware = HardwareConfig(accelerators=("cuvid",))

        with patch(
            "sms_transcode.tools.detection._run_command",
            side_effect=_fake_run(responses),
        ):
            transcoder = detect_transcoder(binary, hardware)

        assert transcoder is not None
        assert transcoder.path == binary
        assert transcoder.version == "6.1.1-3ubuntu5"
        assert transcoder.hardware_accelerators == (HardwareAccelerator("cuvid"),)
        assert transcoder.has_encoder("libx264")

    def test_invalid_binary_skipped(self, binary: Path):
        """Candidates that fail -version are skipped."""
        with (
            patch(
                "sms_transcode.tools.detection._run_command",
                return_value=("", "not a transcoder", 1),
            ),
            patch("sms_transcode.tools.detection.shutil.which", return_value=None),
            patch("sms_transcode.tools.detection.TRANSCODER_PATHS", ()),
        ):
            assert detect_transcoder(binary) is None

    def test_nothing_found(self, tmp_path: Path):
        """Missing candidates yield None and require_transcoder raises."""
        with (
            patch("sms_transcode.tools.detection.shutil.which", return_value=None),
            patch("sms_transcode.tools.detection.TRANSCODER_PATHS", ()),
        ):
            assert detect_transcoder(tmp_path / "missing") is None
            with pytest.raises(TranscoderNotFoundError):
                require_transcoder(tmp_path / "missing")

    def test_path_lookup(self, binary: Path):
        """Without a configured path the PATH lookup is used."""
        responses = {"-version": (VERSION_OUTPUT, "", 0)}

        with (
            patch(
                "sms_transcode.tools.detection._run_command",
                side_effect=_fake_run(responses),
            ),
            patch(
                "sms_transcode.tools.detection.shutil.which",
                return_value=str(binary),
            ),
        ):
            transcoder = detect_transcoder(hardware=HardwareConfig(enabled=False))

        assert transcoder is not None
        assert transcoder.path == binary
        assert transcoder.encoders == frozenset()


class TestCheckTranscoder:
    """Tests for the encoder sanity check."""

    def test_complete(self):
        """All required encoders present."""
        transcoder = Transcoder(Path("ffmpeg"), encoders=frozenset({"libx264", "aac"}))
        assert check_transcoder(transcoder, ("libx264", "aac")) is True

    def test_missing(self, caplog):
        """Missing encoders are reported."""
        transcoder = Transcoder(Path("ffmpeg"), encoders=frozenset({"aac"}))
        with caplog.at_level(logging.WARNING):
            assert check_transcoder(transcoder, ("libx264", "aac")) is False
        assert "libx264" in caplog.text
        assert transcoder.missing_encoders(("libx264", "aac")) == ("libx264",)

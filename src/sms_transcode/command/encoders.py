"""Encoder argument building.

Functions in this module:
- hardware_decode_args: Decode hints for a hardware accelerator
- hardware_encode_args: Scaling and H.264 encoding on an accelerator
- software_encode_args: Scaling and encoding in software
- audio_args: Mapping and encoding of one audio stream
- subtitle_overlay_args: Burn-in or exclusion of the selected subtitle
"""

from __future__ import annotations

import logging

from sms_transcode.command.tokens import Option
from sms_transcode.domain.models import AudioTranscode, Resolution, TranscodeDecisionSet
from sms_transcode.tools.models import HardwareAccelerator

logger = logging.getLogger(__name__)

# Software encoder and tuning per video codec. Low latency settings, since
# output is consumed while it is produced.
SOFTWARE_VIDEO_ENCODERS: dict[str, tuple[str, tuple[tuple[str, str], ...]]] = {
    "h264": (
        "libx264",
        (
            ("-crf", "23"),
            ("-preset", "superfast"),
            ("-pix_fmt", "yuv420p"),
            ("-profile:v", "baseline"),
        ),
    ),
    "vp8": (
        "libvpx",
        (
            ("-crf", "25"),
            ("-b:v", "0"),
            ("-quality", "realtime"),
            ("-cpu-used", "5"),
        ),
    ),
}

# Hardware encoders only produce H.264
HARDWARE_VIDEO_ENCODERS: dict[str, str] = {
    "vaapi": "h264_vaapi",
    "cuvid": "h264_nvenc",
}

# Centre and surround levels applied when downmixing to stereo
DOWNMIX_CENTER_LEVEL = "3dB"
DOWNMIX_SURROUND_LEVEL = "-3dB"


def _scale_filter(resolution: Resolution) -> str:
    return f"scale=w={resolution.width}:h={resolution.height}"


def hardware_decode_args(accelerator: HardwareAccelerator) -> list[Option]:
    """Build input-side decode hints for an accelerator.

    VAAPI decodes into device memory so the encoder can consume frames
    without a round trip through system memory.
    """
    if accelerator.name == "vaapi":
        return [
            Option("-hwaccel", accelerator.name),
            Option("-vaapi_device", str(accelerator.device)),
            Option("-hwaccel_output_format", "vaapi"),
        ]
    if accelerator.name == "cuvid":
        return [Option("-hwaccel", accelerator.name)]

    logger.warning("No decode hints for hardware accelerator %s", accelerator.name)
    return []


def hardware_encode_args(
    resolution: Resolution | None, accelerator: HardwareAccelerator
) -> list[Option]:
    """Build scaling and encoding arguments for an accelerator.

    Args:
        resolution: Target resolution, or None to keep the source size.
        accelerator: Hardware accelerator to encode on.

    Returns:
        Arguments; empty if the accelerator is unknown.
    """
    if accelerator.name == "vaapi":
        # Frames are uploaded to the device, then scaled there
        video_filter = "format=nv12|vaapi,hwupload"
        if resolution is not None:
            video_filter += f",scale_vaapi=w={resolution.width}:h={resolution.height}"
        return [
            Option("-vf", video_filter),
            Option("-c:v", HARDWARE_VIDEO_ENCODERS["vaapi"]),
        ]

    if accelerator.name == "cuvid":
        args: list[Option] = []
        if resolution is not None:
            args.append(Option("-vf", _scale_filter(resolution)))
        args.append(Option("-c:v", HARDWARE_VIDEO_ENCODERS["cuvid"]))
        return args

    logger.warning("No encoder for hardware accelerator %s", accelerator.name)
    return []


def software_encode_args(
    codec: str | None, resolution: Resolution | None
) -> list[Option]:
    """Build scaling and encoding arguments for a software encoder.

    Codecs without a tuned encoder are passed to the transcoder by name.
    """
    args: list[Option] = []
    if resolution is not None:
        args.append(Option("-vf", _scale_filter(resolution)))

    if codec is None:
        return args

    encoder = SOFTWARE_VIDEO_ENCODERS.get(codec)
    if encoder is None:
        args.append(Option("-c:v", codec))
        return args

    name, tuning = encoder
    args.append(Option("-c:v", name))
    args.extend(Option(flag, value) for flag, value in tuning)
    return args


def audio_args(track: int, transcode: AudioTranscode) -> list[Option]:
    """Build mapping and encoding arguments for one audio stream.

    Args:
        track: Index of the stream among the source audio streams.
        transcode: Decision for the stream.

    Returns:
        Arguments for the stream.
    """
    args = [
        Option("-map", f"0:a:{track}"),
        Option("-c:a", transcode.codec),
    ]

    if transcode.quality is not None:
        args.append(Option("-q:a", str(transcode.quality)))

    if transcode.downmix:
        args.extend(
            [
                Option("-ac", str(transcode.channels)),
                Option("-clev", DOWNMIX_CENTER_LEVEL),
                Option("-slev", DOWNMIX_SURROUND_LEVEL),
            ]
        )

    if transcode.sample_rate is not None:
        args.append(Option("-ar", str(transcode.sample_rate)))

    return args


def subtitle_overlay_args(decisions: TranscodeDecisionSet) -> list[Option]:
    """Build video mapping arguments for the selected subtitle.

    Without a selected subtitle the video is mapped alone and subtitles are
    dropped. A hardcoded subtitle is overlaid onto the video. A selected
    text subtitle needs no arguments since it is delivered separately.
    """
    selected = decisions.selected_subtitle()

    if selected is None:
        return [Option("-map", "0:v"), Option("-sn")]

    if selected.hardcoded:
        overlay = f"[0:v][0:s:{decisions.subtitle_track}]overlay[v]"
        return [
            Option("-filter_complex", overlay),
            Option("-map", "[v]"),
        ]

    return []

"""Backend registry: the transcoder binary and its hardware accelerators."""

from sms_transcode.tools.detection import (
    check_transcoder,
    detect_accelerators,
    detect_transcoder,
    require_transcoder,
)
from sms_transcode.tools.models import HardwareAccelerator, Transcoder

__all__ = [
    "HardwareAccelerator",
    "Transcoder",
    "check_transcoder",
    "detect_accelerators",
    "detect_transcoder",
    "require_transcoder",
]

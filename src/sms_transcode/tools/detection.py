"""Transcoder discovery.

Locates the transcoder binary, validates it, and enumerates the hardware
accelerators and encoders it supports. Discovery runs once at startup.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from sms_transcode.config.models import HardwareConfig
from sms_transcode.core.codecs import REQUIRED_ENCODERS
from sms_transcode.exceptions import TranscoderNotFoundError
from sms_transcode.tools.models import HardwareAccelerator, Transcoder

logger = logging.getLogger(__name__)

# Seconds allowed for each probe of the transcoder binary
DETECTION_TIMEOUT = 10

TRANSCODER_NAME = "ffmpeg"

# Install locations checked when the transcoder is not in PATH
TRANSCODER_PATHS: tuple[Path, ...] = (
    Path("/usr/bin/ffmpeg"),
    Path("/usr/local/bin/ffmpeg"),
    Path("/opt/ffmpeg/bin/ffmpeg"),
    Path("/opt/homebrew/bin/ffmpeg"),
)


def _run_command(
    args: list[str], timeout: int = DETECTION_TIMEOUT
) -> tuple[str, str, int]:
    """Run a probe command, returning ``(stdout, stderr, returncode)``.

    A probe that cannot start or exceeds ``timeout`` seconds reports a
    return code of -1 instead of raising.
    """
    command_line = " ".join(args)
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Probe exceeded %ss: %s", timeout, command_line)
        return "", "timeout", -1
    except OSError as e:
        logger.debug("Probe could not start: %s (%s)", command_line, e)
        return "", str(e), -1
    return completed.stdout, completed.stderr, completed.returncode


def _candidate_paths(configured_path: Path | None) -> list[Path]:
    candidates: list[Path] = []
    if configured_path is not None:
        candidates.append(configured_path)

    which_result = shutil.which(TRANSCODER_NAME)
    if which_result:
        candidates.append(Path(which_result))

    candidates.extend(TRANSCODER_PATHS)
    return candidates


def parse_version(output: str) -> str | None:
    """Parse the version from ``-version`` output.

    The first line reads "ffmpeg version 6.1.1 Copyright...".
    """
    match = re.search(r"ffmpeg version (\S+)", output)
    return match.group(1) if match else None


def parse_hwaccels(output: str) -> list[str]:
    """Parse ``-hwaccels`` output into accelerator names.

    Format:
        Hardware acceleration methods:
        vdpau
        vaapi
    """
    names: list[str] = []
    for line in output.splitlines():
        line = line.strip().lower()
        if not line or line.endswith(":"):
            continue
        names.append(line)
    return names


def parse_encoders(output: str) -> frozenset[str]:
    """Parse ``-encoders`` output.

    Format: " V....D libx264    libx264 H.264 / AVC..."
    where the six flag columns are V/A/S, F, S, X, B, D.

    Returns:
        Encoder names (lowercase).
    """
    encoders = set()
    for line in output.splitlines():
        match = re.match(r"\s+[VASFXBDI.]{6}\s+(\S+)", line)
        if match and match.group(1) != "=":
            encoders.add(match.group(1).lower())
    return frozenset(encoders)


def detect_accelerators(
    path: Path, hardware: HardwareConfig
) -> tuple[HardwareAccelerator, ...]:
    """Enumerate usable hardware accelerators in configured preference order.

    Args:
        path: Transcoder executable.
        hardware: Hardware configuration.

    Returns:
        Accelerators that are enabled, supported by the binary and, for
        device based backends, have an existing device node.
    """
    if not hardware.enabled or not hardware.accelerators:
        return ()

    stdout, _, rc = _run_command([str(path), "-hide_banner", "-hwaccels"])
    if rc != 0:
        logger.warning("Could not list hardware accelerators for %s", path)
        return ()

    available = set(parse_hwaccels(stdout))
    accelerators: list[HardwareAccelerator] = []

    for name in hardware.accelerators:
        if name not in available:
            logger.debug("Hardware accelerator %s not supported by %s", name, path)
            continue

        if name == "vaapi":
            if not hardware.vaapi_device.exists():
                logger.info(
                    "VAAPI supported but device %s not found", hardware.vaapi_device
                )
                continue
            accelerators.append(HardwareAccelerator(name, hardware.vaapi_device))
        else:
            accelerators.append(HardwareAccelerator(name))

    return tuple(accelerators)


def detect_transcoder(
    configured_path: Path | None = None,
    hardware: HardwareConfig | None = None,
) -> Transcoder | None:
    """Locate and validate the transcoder.

    Candidates are tried in order: the configured path, PATH lookup, then
    well-known install locations. The first one that answers ``-version``
    wins.

    Args:
        configured_path: Path from configuration, if any.
        hardware: Hardware configuration; defaults to HardwareConfig().

    Returns:
        Transcoder descriptor, or None if no usable binary was found.
    """
    if hardware is None:
        hardware = HardwareConfig()

    for candidate in _candidate_paths(configured_path):
        if not candidate.is_file():
            continue

        stdout, stderr, rc = _run_command([str(candidate), "-version"])
        if rc != 0:
            logger.warning("Invalid transcoder %s: %s", candidate, stderr.strip())
            continue

        encoders: frozenset[str] = frozenset()
        enc_stdout, _, enc_rc = _run_command(
            [str(candidate), "-hide_banner", "-encoders"]
        )
        if enc_rc == 0:
            encoders = parse_encoders(enc_stdout)

        transcoder = Transcoder(
            path=candidate,
            version=parse_version(stdout),
            hardware_accelerators=detect_accelerators(candidate, hardware),
            encoders=encoders,
        )
        logger.info("Transcoder %s", transcoder)
        return transcoder

    logger.error("Failed to find a suitable transcoder")
    return None


def check_transcoder(
    transcoder: Transcoder, required: Sequence[str] = REQUIRED_ENCODERS
) -> bool:
    """Check that the transcoder provides every encoder commands rely on.

    Returns:
        True if all required encoders are present. Missing encoders are
        logged as a warning.
    """
    missing = transcoder.missing_encoders(tuple(required))
    if missing:
        logger.warning(
            "Transcoder is missing required encoders: %s", ", ".join(missing)
        )
        return False
    return True


def require_transcoder(
    configured_path: Path | None = None,
    hardware: HardwareConfig | None = None,
) -> Transcoder:
    """Like detect_transcoder but raise when nothing is found.

    Raises:
        TranscoderNotFoundError: If no usable transcoder exists.
    """
    transcoder = detect_transcoder(configured_path, hardware)
    if transcoder is None:
        raise TranscoderNotFoundError(
            f"{TRANSCODER_NAME} not found; set SMS_TRANSCODER_PATH or "
            "[tools] transcoder in the config file"
        )
    check_transcoder(transcoder)
    return transcoder

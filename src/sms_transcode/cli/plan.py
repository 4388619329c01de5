"""Negotiate a media element for a client profile and show the result.

Useful for diagnosing why a client gets a transcode instead of direct
play and what the transcoder would be asked to do.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import click
from pydantic import ValidationError

from sms_transcode.command import build_transcode_commands
from sms_transcode.config import get_config
from sms_transcode.domain.enums import StreamType
from sms_transcode.domain.models import TranscodeProfile
from sms_transcode.domain.schemas import CapabilityProfile, MediaElementModel
from sms_transcode.negotiation import is_transcode_required, negotiate_profile
from sms_transcode.tools import HardwareAccelerator, Transcoder, detect_transcoder


def _load_model(model, path: Path, label: str):
    try:
        return model.model_validate_json(path.read_text())
    except ValidationError as e:
        raise click.BadParameter(f"invalid {label}:\n{e}") from e


def _resolve_transcoder(
    hwaccel: tuple[str, ...], transcoder_path: Path | None, config
) -> Transcoder:
    """Use the given accelerators, or detect the installed transcoder."""
    path = transcoder_path or config.tools.transcoder

    if hwaccel:
        accelerators = tuple(
            HardwareAccelerator(
                name, config.hardware.vaapi_device if name == "vaapi" else None
            )
            for name in hwaccel
            if name != "none"
        )
        return Transcoder(
            path=path or Path("ffmpeg"), hardware_accelerators=accelerators
        )

    transcoder = detect_transcoder(path, config.hardware)
    if transcoder is None:
        click.echo("Warning: no transcoder found, planning software only", err=True)
        return Transcoder(path=path or Path("ffmpeg"))
    return transcoder


@click.command("plan")
@click.argument(
    "media_json", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.argument(
    "profile_json", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--hwaccel",
    type=click.Choice(["vaapi", "cuvid", "none"], case_sensitive=False),
    multiple=True,
    help="Plan for these accelerators in order instead of detecting them.",
)
@click.option(
    "--transcoder",
    "transcoder_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Transcoder path to use in commands.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def plan_command(
    ctx: click.Context,
    media_json: Path,
    profile_json: Path,
    hwaccel: tuple[str, ...],
    transcoder_path: Path | None,
    json_output: bool,
) -> None:
    """Negotiate MEDIA_JSON for the client in PROFILE_JSON.

    Prints the decision set and the command variants in fallback order.
    Exits with code 1 if negotiation fails.
    """
    media = _load_model(MediaElementModel, media_json, "media element")
    media = media.to_media_element()
    capabilities = _load_model(CapabilityProfile, profile_json, "capability profile")

    config = get_config(config_path=ctx.obj.get("config_path"))

    required = is_transcode_required(media, capabilities)
    profile = TranscodeProfile(
        media=media,
        capabilities=capabilities,
        type=StreamType.DIRECT if required is False else StreamType.TRANSCODE,
    )

    if not negotiate_profile(profile):
        click.echo("Negotiation failed: no viable stream for this client", err=True)
        ctx.exit(1)

    transcoder = _resolve_transcoder(hwaccel, transcoder_path, config)
    variants = build_transcode_commands(profile, transcoder, config.streaming) or []

    if json_output:
        data = {
            "profile_id": str(profile.id),
            "type": profile.type.value,
            "decisions": dataclasses.asdict(profile.decisions),
            "commands": [
                {"accelerator": variant.accelerator, "args": variant.args}
                for variant in variants
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    decisions = profile.decisions
    click.echo(f"Profile {profile.id} ({profile.type.value})")
    click.echo(f"  Quality: {decisions.quality}")
    click.echo(f"  Format:  {decisions.format or '-'}")
    if decisions.video is not None:
        resolution = decisions.video.resolution or "native"
        click.echo(f"  Video:   {decisions.video.codec} @ {resolution}")
    for track, audio in enumerate(decisions.audio or ()):
        extra = " (downmix)" if audio.downmix else ""
        click.echo(f"  Audio {track}: {audio.codec}{extra}")
    for track, subtitle in enumerate(decisions.subtitles or ()):
        extra = " (hardcoded)" if subtitle.hardcoded else ""
        click.echo(f"  Subtitle {track}: {subtitle.codec}{extra}")

    click.echo("Commands:")
    for variant in variants:
        click.echo(f"  [{variant.accelerator or 'software'}] {variant}")

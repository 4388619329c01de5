"""Backend discovery report.

Shows which transcoder binary would be used, its version, the hardware
accelerators that command synthesis would target and any missing
encoders.
"""

import json

import click

from sms_transcode.config import get_config
from sms_transcode.core.codecs import REQUIRED_ENCODERS
from sms_transcode.tools import detect_transcoder
from sms_transcode.tools.models import Transcoder

EXIT_OK = 0
EXIT_WARNINGS = 1
EXIT_CRITICAL = 2


def _serialize_transcoder(transcoder: Transcoder | None) -> dict:
    if transcoder is None:
        return {"found": False}
    return {
        "found": True,
        "path": str(transcoder.path),
        "version": transcoder.version,
        "hardware_accelerators": [
            {
                "name": accelerator.name,
                "device": str(accelerator.device) if accelerator.device else None,
            }
            for accelerator in transcoder.hardware_accelerators
        ],
        "missing_encoders": list(transcoder.missing_encoders(REQUIRED_ENCODERS)),
    }


@click.command("backends")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def backends_command(ctx: click.Context, json_output: bool) -> None:
    """Report the transcoder and hardware accelerators in use.

    Exit codes:
      0 - Transcoder found with all required encoders
      1 - Transcoder found but some encoders are missing
      2 - No transcoder found
    """
    config = get_config(config_path=ctx.obj.get("config_path"))
    transcoder = detect_transcoder(config.tools.transcoder, config.hardware)

    if json_output:
        click.echo(json.dumps(_serialize_transcoder(transcoder), indent=2))
    elif transcoder is None:
        click.echo("✗ Transcoder: not found")
        click.echo("  └─ Install ffmpeg or set SMS_TRANSCODER_PATH")
    else:
        version = transcoder.version or "unknown"
        click.echo(f"✓ Transcoder: {version} ({transcoder.path})")
        click.echo("Variant order:")
        for position, accelerator in enumerate(transcoder.hardware_accelerators):
            click.echo(f"  {position}. {accelerator}")
        click.echo(f"  {len(transcoder.hardware_accelerators)}. software")

        missing = transcoder.missing_encoders(REQUIRED_ENCODERS)
        if missing:
            click.echo(f"✗ Missing encoders: {', '.join(missing)}")

    if transcoder is None:
        ctx.exit(EXIT_CRITICAL)
    if transcoder.missing_encoders(REQUIRED_ENCODERS):
        ctx.exit(EXIT_WARNINGS)
    ctx.exit(EXIT_OK)

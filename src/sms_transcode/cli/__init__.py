"""Command line entry point for sms-transcode.

Subcommands:
    backends  Report the transcoder and hardware accelerators found
    plan      Negotiate a profile and print the transcode commands
"""

import logging
from pathlib import Path

import click

from sms_transcode.cli.backends import backends_command
from sms_transcode.cli.plan import plan_command

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


@click.group()
@click.version_option(package_name="sms-transcode")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.sms/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level for this run, overriding the config file.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs to this file instead of the configured one.",
)
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """sms-transcode - Negotiate and plan transcodes for media clients."""
    from sms_transcode.config.logging_factory import configure_logging_from_cli

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    configure_logging_from_cli(
        config_path=config_path,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )
    logger.debug("Invoked subcommand %s", ctx.invoked_subcommand)


main.add_command(backends_command)
main.add_command(plan_command)

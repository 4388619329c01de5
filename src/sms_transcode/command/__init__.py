"""Command synthesis: negotiated profiles to transcoder command variants."""

from sms_transcode.command.builder import CommandBuilder
from sms_transcode.command.synthesis import (
    build_segment_commands,
    build_transcode_commands,
    format_args,
    get_segment_output_path,
    get_stream_directory,
    segment_requires_reencode,
    variant_accelerators,
)
from sms_transcode.command.tokens import (
    CommandVariant,
    Executable,
    Option,
    Output,
    Token,
)

__all__ = [
    "CommandBuilder",
    "CommandVariant",
    "Executable",
    "Option",
    "Output",
    "Token",
    "build_segment_commands",
    "build_transcode_commands",
    "format_args",
    "get_segment_output_path",
    "get_stream_directory",
    "segment_requires_reencode",
    "variant_accelerators",
]

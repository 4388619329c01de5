"""Command variant builder."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from sms_transcode.command.tokens import (
    CommandVariant,
    Executable,
    Option,
    Output,
    Token,
)


@dataclass
class CommandBuilder:
    """Accumulates tokens for one command variant.

    Example:
        variant = (
            CommandBuilder("/usr/bin/ffmpeg")
            .option("-i", "input.mkv")
            .option("-c:v", "copy")
            .output("-")
            .build()
        )
        variant.args  # ["/usr/bin/ffmpeg", "-i", "input.mkv", "-c:v", "copy", "-"]

    Attributes:
        executable: Transcoder path.
        accelerator: Hardware accelerator the variant targets, if any.
    """

    executable: str
    accelerator: str | None = None
    _tokens: list[Token] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._tokens.append(Executable(self.executable))

    def option(self, flag: str, value: object = None) -> CommandBuilder:
        """Append an option; non-string values are converted with str()."""
        self._tokens.append(Option(flag, None if value is None else str(value)))
        return self

    def extend(self, tokens: Iterable[Token]) -> CommandBuilder:
        self._tokens.extend(tokens)
        return self

    def output(self, target: object) -> CommandBuilder:
        self._tokens.append(Output(str(target)))
        return self

    def build(self) -> CommandVariant:
        return CommandVariant(accelerator=self.accelerator, tokens=tuple(self._tokens))

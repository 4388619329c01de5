"""Typed command tokens.

A command variant is an ordered sequence of tokens rather than a flat
list of strings, so tests and callers can ask what a variant does
(which accelerator, which encoder, which output) without re-parsing
argument positions.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Executable:
    """Transcoder executable, always the first token."""

    path: str

    def args(self) -> tuple[str, ...]:
        return (self.path,)


@dataclass(frozen=True)
class Option:
    """Flag with an optional value, e.g. ``-c:v libx264`` or ``-copyts``."""

    flag: str
    value: str | None = None

    def args(self) -> tuple[str, ...]:
        if self.value is None:
            return (self.flag,)
        return (self.flag, self.value)


@dataclass(frozen=True)
class Output:
    """Output target: a file path, a path pattern or ``-`` for stdout."""

    target: str

    def args(self) -> tuple[str, ...]:
        return (self.target,)


Token = Executable | Option | Output


@dataclass(frozen=True)
class CommandVariant:
    """One candidate invocation of the transcoder.

    Attributes:
        accelerator: Hardware accelerator this variant targets, or None
            for the software path.
        tokens: Ordered argument tokens.
    """

    accelerator: str | None
    tokens: tuple[Token, ...]

    @property
    def args(self) -> list[str]:
        """Flat argument list to hand to the process executor."""
        return [arg for token in self.tokens for arg in token.args()]

    @property
    def is_software(self) -> bool:
        return self.accelerator is None

    @property
    def output(self) -> str | None:
        """Target of the last Output token, if any."""
        outputs = [t.target for t in self.tokens if isinstance(t, Output)]
        return outputs[-1] if outputs else None

    def options(self) -> Iterator[Option]:
        for token in self.tokens:
            if isinstance(token, Option):
                yield token

    def has_flag(self, flag: str) -> bool:
        return any(option.flag == flag for option in self.options())

    def value_of(self, flag: str) -> str | None:
        """Value of the first option with ``flag``, or None."""
        for option in self.options():
            if option.flag == flag:
                return option.value
        return None

    def values_of(self, flag: str) -> list[str | None]:
        """Values of every option with ``flag``, in order."""
        return [option.value for option in self.options() if option.flag == flag]

    def __str__(self) -> str:
        return " ".join(self.args)

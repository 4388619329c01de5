"""Typed access to SMS_* environment variables.

The loader reads every override through EnvReader. A mapping can be
passed in place of os.environ, which keeps loader tests independent of
the process environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

TRUTHY = frozenset({"1", "true", "yes", "on"})


class EnvReader:
    """Read environment values as str, int, bool, Path or name lists.

    Malformed values are logged and the caller's default is used instead,
    so a typo in one variable does not stop the server from starting.

    Example:
        reader = EnvReader({"SMS_SEGMENT_DURATION": "6"})
        reader.get_int("SMS_SEGMENT_DURATION", 10)  # 6
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def _lookup(self, var: str, *, allow_empty: bool) -> str | None:
        raw = self._env.get(var)
        if raw == "" and not allow_empty:
            return None
        return raw

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Return the value, or ``default`` when unset or empty."""
        raw = self._lookup(var, allow_empty=False)
        return default if raw is None else raw

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Return the value parsed as a base 10 integer.

        Args:
            var: Variable name.
            default: Used when the variable is unset or malformed.
        """
        raw = self._lookup(var, allow_empty=True)
        if raw is None:
            return default
        try:
            return int(raw, 10)
        except ValueError:
            logger.warning("Invalid integer value for %s: %r", var, raw)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Return True for 1/true/yes/on (any case), False for anything else."""
        raw = self._lookup(var, allow_empty=True)
        if raw is None:
            return default
        return raw.strip().lower() in TRUTHY

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Return the value as a user-expanded Path.

        When ``must_exist`` is set a path missing from disk is reported and
        ``default`` is returned in its place.
        """
        raw = self._lookup(var, allow_empty=False)
        if raw is None:
            return default

        candidate = Path(raw).expanduser()
        if must_exist and not candidate.exists():
            logger.warning("%s names a path that does not exist: %s", var, raw)
            return default
        return candidate

    def get_list(
        self, var: str, separator: str = ",", default: tuple[str, ...] | None = None
    ) -> tuple[str, ...] | None:
        """Return the lowercase, non-empty items of a delimited value.

        A set but empty variable gives an empty tuple, which callers use to
        switch a feature off.
        """
        raw = self._lookup(var, allow_empty=True)
        if raw is None:
            return default
        items = (item.strip().lower() for item in raw.split(separator))
        return tuple(item for item in items if item)

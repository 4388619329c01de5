"""Profile context for structured logging.

Negotiation and command synthesis run on request threads for many
sessions at once. The profile context is carried in contextvars so every
log record emitted while serving a profile carries its id and client.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from collections.abc import Generator

_profile_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "profile_id", default=None
)
_client: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "client", default=None
)


def set_profile_context(profile_id: UUID | str, client: str | None = None) -> None:
    """Set the current profile context.

    Args:
        profile_id: Transcode profile identifier.
        client: Client name from the capability profile, or None.
    """
    _profile_id.set(str(profile_id))
    _client.set(client)


def clear_profile_context() -> None:
    """Clear the current profile context."""
    _profile_id.set(None)
    _client.set(None)


@contextmanager
def profile_context(
    profile_id: UUID | str,
    client: str | None = None,
) -> Generator[None, None, None]:
    """Context manager for work done on behalf of one profile.

    Restores the previous context on exit, so contexts nest.

    Example:
        with profile_context(profile.id, profile.client):
            logger.info("Negotiating")  # Record carries the profile id
    """
    old_profile_id = _profile_id.get()
    old_client = _client.get()
    try:
        set_profile_context(profile_id, client)
        yield
    finally:
        _profile_id.set(old_profile_id)
        _client.set(old_client)


def get_profile_context() -> tuple[str | None, str | None]:
    """Get current profile context.

    Returns:
        Tuple of (profile_id, client), either may be None.
    """
    return _profile_id.get(), _client.get()


class ProfileContextFilter(logging.Filter):
    """Logging filter that injects the profile context into log records.

    Adds profile_id and client attributes for JSON output, and a compact
    profile_tag such as ``[P1a2b3c4d:chromecast] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        profile_id, client = get_profile_context()

        record.profile_id = profile_id
        record.client = client

        if profile_id:
            short_id = profile_id[:8]
            if client:
                record.profile_tag = f"[P{short_id}:{client}] "
            else:
                record.profile_tag = f"[P{short_id}] "
        else:
            record.profile_tag = ""

        return True

"""In-memory registry of active transcode profiles.

The registry is shared by every session. A single lock serializes add,
get and remove. Removal takes the entry out and terminates its external
process under that lock, so a profile's process is stopped at most once
even when two sessions remove the same profile concurrently.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol
from uuid import UUID

from sms_transcode.domain.enums import StreamType
from sms_transcode.domain.models import TranscodeProfile
from sms_transcode.exceptions import DuplicateProfileError

logger = logging.getLogger(__name__)


class ProcessManager(Protocol):
    """Process management collaborator owning transcoder processes."""

    def end_process(self, profile_id: UUID) -> None:
        """Signal the process associated with a profile to stop.

        Args:
            profile_id: Identifier of the profile being removed.
        """
        ...


class ProfileRegistry:
    """Thread-safe collection of TranscodeProfiles keyed by identifier."""

    def __init__(self, process_manager: ProcessManager | None = None) -> None:
        """Initialize the registry.

        Args:
            process_manager: Collaborator asked to stop the process of a
                removed transcode profile. None disables termination.
        """
        self._process_manager = process_manager
        self._profiles: dict[UUID, TranscodeProfile] = {}
        self._lock = threading.Lock()

    def add(self, profile: TranscodeProfile) -> None:
        """Register a profile.

        Raises:
            DuplicateProfileError: If a profile with the same id exists.
        """
        with self._lock:
            if profile.id in self._profiles:
                raise DuplicateProfileError(f"Profile {profile.id} already registered")
            self._profiles[profile.id] = profile
        logger.debug("Registered %s profile %s", profile.type.value, profile.id)

    def get(self, profile_id: UUID) -> TranscodeProfile | None:
        """Get a profile by identifier, or None if not registered."""
        with self._lock:
            return self._profiles.get(profile_id)

    def remove(self, profile_id: UUID) -> TranscodeProfile | None:
        """Remove a profile, stopping its transcoder process first.

        Args:
            profile_id: Identifier of the profile to remove.

        Returns:
            The removed profile, or None if it was not registered.
        """
        with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None:
                return None

            if (
                profile.type is StreamType.TRANSCODE
                and self._process_manager is not None
            ):
                # Ended under the lock so each process is stopped at most once
                self._process_manager.end_process(profile_id)

            del self._profiles[profile_id]

        logger.debug("Removed %s profile %s", profile.type.value, profile_id)
        return profile

    def profiles(self) -> list[TranscodeProfile]:
        """Snapshot of the registered profiles."""
        with self._lock:
            return list(self._profiles.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)

    def __contains__(self, profile_id: object) -> bool:
        with self._lock:
            return profile_id in self._profiles

"""Registry of active transcode profiles."""

from sms_transcode.registry.profiles import ProcessManager, ProfileRegistry

__all__ = ["ProcessManager", "ProfileRegistry"]

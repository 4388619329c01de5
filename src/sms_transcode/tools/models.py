"""Backend descriptor models.

A Transcoder describes the external transcoder binary found at startup
and the hardware accelerators it can drive. Both are frozen: discovery
happens once and the result is shared read-only by every synthesis call.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class HardwareAccelerator:
    """Hardware acceleration backend."""

    name: str  # vaapi, cuvid
    device: Path | None = None  # Render node for device based backends

    def __str__(self) -> str:
        if self.device is not None:
            return f"{self.name} ({self.device})"
        return self.name


@dataclass(frozen=True)
class Transcoder:
    """External transcoder binary and its capabilities.

    ``hardware_accelerators`` is ordered by preference; command synthesis
    emits one variant per accelerator in this order before the software
    fallback.
    """

    path: Path
    version: str | None = None
    hardware_accelerators: tuple[HardwareAccelerator, ...] = ()
    encoders: frozenset[str] = field(default_factory=frozenset)

    def has_encoder(self, name: str) -> bool:
        return name.lower() in self.encoders

    def missing_encoders(self, required: tuple[str, ...]) -> tuple[str, ...]:
        """Required encoders this build does not provide."""
        return tuple(name for name in required if not self.has_encoder(name))

    def __str__(self) -> str:
        accelerators = ", ".join(map(str, self.hardware_accelerators)) or "none"
        version = self.version or "unknown"
        return f"{self.path} (version {version}, accelerators: {accelerators})"

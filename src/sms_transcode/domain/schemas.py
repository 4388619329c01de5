"""Pydantic models for data received from collaborators.

The session layer hands over client capability requests and the catalog
hands over media descriptors as JSON-like mappings. These models validate
them at the boundary:
- CapabilityProfile: client capability request (used directly by the core)
- MediaElementModel: media descriptor payload, converted to MediaElement
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sms_transcode.domain.enums import MediaElementType
from sms_transcode.domain.models import (
    AudioStream,
    MediaElement,
    SubtitleStream,
    VideoStream,
)


def _normalize_names(values: tuple[str, ...] | None) -> tuple[str, ...] | None:
    if values is None:
        return None
    normalized = tuple(v.casefold().strip() for v in values)
    if any(not v for v in normalized):
        raise ValueError("Codec names must not be empty")
    return normalized


class CapabilityProfile(BaseModel):
    """Capability request advertised by a client for one playback."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    client: str | None = None
    quality: int | None = Field(default=None, ge=0)
    codecs: tuple[str, ...] | None = None
    mch_codecs: tuple[str, ...] | None = None
    max_bitrate: int | None = Field(default=None, gt=0)
    max_sample_rate: int | None = Field(default=None, gt=0)
    direct_play: bool = False
    format: str | None = None
    offset: int = Field(default=0, ge=0)
    audio_track: int | None = Field(default=None, ge=0)
    subtitle_track: int | None = Field(default=None, ge=0)

    @field_validator("codecs", "mch_codecs")
    @classmethod
    def validate_codecs(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        """Lowercase codec names and reject blanks."""
        return _normalize_names(v)

    @field_validator("format", "client")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Lowercase identifiers; blank means unset."""
        if v is None:
            return None
        v = v.casefold().strip()
        return v or None


class VideoStreamModel(BaseModel):
    """Video stream payload."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    codec: str
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    bitrate: int = Field(default=0, ge=0)


class AudioStreamModel(BaseModel):
    """Audio stream payload."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    codec: str
    sample_rate: int = Field(default=0, ge=0)
    configuration: str | None = None
    bitrate: int = Field(default=0, ge=0)


class SubtitleStreamModel(BaseModel):
    """Subtitle stream payload."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    format: str
    index: int | None = Field(default=None, ge=0)
    forced: bool = False
    language: str | None = None


class MediaElementModel(BaseModel):
    """Media descriptor payload from the catalog."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: UUID | None = None
    path: Path
    type: MediaElementType
    title: str | None = None
    bitrate: int = Field(default=0, ge=0)
    video_stream: VideoStreamModel | None = None
    audio_streams: list[AudioStreamModel] = Field(default_factory=list)
    subtitle_streams: list[SubtitleStreamModel] = Field(default_factory=list)

    def to_media_element(self) -> MediaElement:
        """Convert the payload into an immutable MediaElement.

        Subtitle streams without an explicit index are numbered by position.
        """
        video = None
        if self.video_stream is not None:
            video = VideoStream(**self.video_stream.model_dump())

        subtitles = tuple(
            SubtitleStream(
                format=s.format,
                index=s.index if s.index is not None else position,
                forced=s.forced,
                language=s.language,
            )
            for position, s in enumerate(self.subtitle_streams)
        )

        kwargs = {}
        if self.id is not None:
            kwargs["id"] = self.id

        return MediaElement(
            path=self.path,
            type=self.type,
            title=self.title,
            bitrate=self.bitrate,
            video_stream=video,
            audio_streams=tuple(
                AudioStream(**a.model_dump()) for a in self.audio_streams
            ),
            subtitle_streams=subtitles,
            **kwargs,
        )

"""Unit tests for audio negotiation."""

from pathlib import Path

import pytest

from sms_transcode.domain import (
    AudioQuality,
    AudioStream,
    CapabilityProfile,
    MediaElement,
    MediaElementType,
    VideoQuality,
    VideoStream,
)
from sms_transcode.negotiation import TranscodeReasonCode, negotiate_audio


def _audio_item(*streams: AudioStream, bitrate: int = 900) -> MediaElement:
    return MediaElement(
        path=Path("/media/music/track"),
        type=MediaElementType.AUDIO,
        bitrate=bitrate,
        audio_streams=streams,
    )


def _video_item(*streams: AudioStream) -> MediaElement:
    return MediaElement(
        path=Path("/media/movies/movie.mkv"),
        type=MediaElementType.VIDEO,
        bitrate=4000,
        video_stream=VideoStream("h264", 1280, 720),
        audio_streams=streams,
    )


class TestAudioCopy:
    """Tests for streams that are passed through."""

    def test_lossless_flac_copied(self, flac_media: MediaElement) -> None:
        """FLAC requested at lossless quality is copied into a FLAC container."""
        capabilities = CapabilityProfile(
            quality=AudioQuality.LOSSLESS, codecs=("flac", "mp3")
        )
        result = negotiate_audio(flac_media, capabilities)

        assert result is not None
        assert len(result.transcodes) == 1
        assert result.transcodes[0].is_copy
        assert result.format == "flac"
        assert result.audio_track == 0

    def test_video_stereo_aac_copied(
        self, video_media: MediaElement, capabilities: CapabilityProfile
    ) -> None:
        """AAC in HLS is copied for video items."""
        result = negotiate_audio(video_media, capabilities)

        assert result is not None
        assert result.transcodes[0].is_copy
        assert result.format == "hls"

    def test_unstreamable_codec_converted(self) -> None:
        """Codecs the server cannot stream standalone are converted."""
        media = _audio_item(AudioStream("alac", 44100, "stereo"))
        capabilities = CapabilityProfile(
            quality=AudioQuality.LOSSLESS, codecs=("alac", "flac")
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.reasons[0][0].code is TranscodeReasonCode.CODEC_NOT_STREAMABLE
        assert result.transcodes[0].codec == "flac"
        assert result.format == "flac"


class TestAudioTranscode:
    """Tests for streams that are converted."""

    def test_bitrate_ceiling_for_audio_items(self, flac_media: MediaElement) -> None:
        """Audio items over the tier bitrate are re-encoded."""
        capabilities = CapabilityProfile(
            quality=AudioQuality.MEDIUM, codecs=("mp3", "flac")
        )
        result = negotiate_audio(flac_media, capabilities)

        assert result is not None
        transcode = result.transcodes[0]
        assert transcode.codec == "libmp3lame"
        assert transcode.quality == 4
        assert transcode.sample_rate is None
        assert transcode.downmix is False
        assert result.format == "mp3"
        assert result.reasons[0][0].code is TranscodeReasonCode.BITRATE_EXCEEDED

    def test_lossless_preferred_with_direct_play(self) -> None:
        """Lossless sources prefer lossless targets with direct play."""
        media = _audio_item(AudioStream("flac", 96000, "stereo"))
        capabilities = CapabilityProfile(
            quality=AudioQuality.MEDIUM,
            codecs=("mp3", "flac"),
            max_sample_rate=48000,
            direct_play=True,
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        transcode = result.transcodes[0]
        assert transcode.codec == "flac"
        assert transcode.sample_rate == 48000
        assert transcode.quality is None
        assert result.format == "flac"

    def test_sample_rate_capped_by_codec(self) -> None:
        """The output rate never exceeds what the codec supports."""
        media = _audio_item(AudioStream("wmav2", 96000, "stereo"))
        capabilities = CapabilityProfile(
            quality=AudioQuality.LOSSLESS, codecs=("mp3",)
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].sample_rate == 48000

    def test_dsd_exempt_from_sample_rate(self) -> None:
        """DSD streams above the sample rate limit are still copied."""
        media = _audio_item(AudioStream("dsd_lsbf", 2822400, "stereo"))
        capabilities = CapabilityProfile(
            quality=AudioQuality.LOSSLESS,
            codecs=("dsd",),
            max_sample_rate=192000,
            format="matroska",
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].is_copy

    def test_video_quality_maps_audio_quality(self) -> None:
        """Video items derive the audio quality from the video quality."""
        media = _video_item(AudioStream("dts", 48000, "stereo"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.VERY_HIGH, codecs=("h264", "vorbis"), format="matroska"
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].codec == "libvorbis"
        assert result.transcodes[0].quality == 8


class TestMultichannel:
    """Tests for multichannel streams."""

    def test_downmix_without_multichannel_codecs(self) -> None:
        """No multichannel list means a stereo downmix."""
        media = _video_item(AudioStream("ac3", 48000, "5.1"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH, codecs=("h264", "aac"), format="hls"
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        transcode = result.transcodes[0]
        assert transcode.downmix is True
        assert transcode.channels == 2
        assert transcode.codec == "aac"
        assert result.reasons[0][0].code is TranscodeReasonCode.MULTICHANNEL_UNSUPPORTED

    def test_downmix_without_compatible_multichannel_codec(self) -> None:
        """Multichannel codecs the container cannot carry cause a downmix."""
        media = _video_item(AudioStream("dts", 48000, "5.1"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH,
            codecs=("h264", "aac"),
            mch_codecs=("opus",),
            format="hls",
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].downmix is True

    def test_multichannel_codec_selected(self) -> None:
        """A compatible multichannel codec keeps all channels."""
        media = _video_item(AudioStream("dts", 48000, "5.1"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH,
            codecs=("h264", "aac"),
            mch_codecs=("dts", "ac3"),
            format="hls",
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].codec == "ac3"
        assert result.transcodes[0].downmix is False

    def test_multichannel_copied(self) -> None:
        """Accepted multichannel codecs are copied."""
        media = _video_item(AudioStream("ac3", 48000, "5.1"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH,
            codecs=("h264", "aac"),
            mch_codecs=("ac3",),
            format="hls",
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.transcodes[0].is_copy


class TestMultipleStreams:
    """Tests for elements with several audio streams."""

    def test_decisions_index_aligned(self) -> None:
        """One decision per stream, in stream order."""
        media = _video_item(
            AudioStream("aac", 48000, "stereo"),
            AudioStream("dts", 48000, "5.1"),
            AudioStream("mp3", 44100, "stereo"),
        )
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH, codecs=("h264", "aac", "mp3"), format="hls"
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert len(result.transcodes) == 3
        assert result.transcodes[0].is_copy
        assert result.transcodes[1].downmix is True
        assert result.transcodes[2].is_copy
        assert len(result.reasons) == 3

    def test_selected_track_kept(self) -> None:
        """A track chosen by the client is not overridden."""
        media = _video_item(AudioStream("aac"), AudioStream("aac"))
        capabilities = CapabilityProfile(
            quality=VideoQuality.HIGH, codecs=("aac",), format="hls", audio_track=1
        )
        result = negotiate_audio(media, capabilities)

        assert result is not None
        assert result.audio_track == 1


class TestAudioNegotiationFailures:
    """Tests for missing input and unviable requests."""

    def test_video_item_without_format(self) -> None:
        """Video items need a container format."""
        media = _video_item(AudioStream("aac", 48000, "stereo"))
        capabilities = CapabilityProfile(quality=VideoQuality.HIGH, codecs=("aac",))
        assert negotiate_audio(media, capabilities) is None

    def test_missing_codecs(self, flac_media: MediaElement) -> None:
        """No codec list fails negotiation."""
        assert negotiate_audio(flac_media, CapabilityProfile(quality=1)) is None

    def test_missing_quality(self, flac_media: MediaElement) -> None:
        """No quality fails negotiation."""
        assert negotiate_audio(flac_media, CapabilityProfile(codecs=("mp3",))) is None

    def test_invalid_audio_quality(self, flac_media: MediaElement) -> None:
        """Audio items need an audio quality tier."""
        capabilities = CapabilityProfile(quality=5, codecs=("mp3",))
        assert negotiate_audio(flac_media, capabilities) is None

    def test_exhausted_search(self) -> None:
        """No transcodable candidate is a negotiation failure."""
        media = _audio_item(AudioStream("alac", 44100, "stereo"))
        capabilities = CapabilityProfile(quality=AudioQuality.HIGH, codecs=("wmav2",))
        assert negotiate_audio(media, capabilities) is None

    def test_no_streams(self) -> None:
        """Elements without audio negotiate to an empty decision list."""
        result = negotiate_audio(
            _audio_item(), CapabilityProfile(quality=1, codecs=("mp3",))
        )

        assert result is not None
        assert result.transcodes == ()
        assert result.audio_track is None

    @pytest.mark.parametrize("quality", [AudioQuality.LOW, AudioQuality.HIGH])
    def test_explicit_quality_override(
        self, flac_media: MediaElement, quality: int
    ) -> None:
        """An explicit quality argument overrides the profile quality."""
        capabilities = CapabilityProfile(quality=AudioQuality.LOSSLESS, codecs=("mp3",))
        result = negotiate_audio(flac_media, capabilities, quality=quality)

        assert result is not None
        assert result.transcodes[0].codec == "libmp3lame"

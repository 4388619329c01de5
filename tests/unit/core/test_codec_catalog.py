"""Unit tests for the codec catalog."""

from sms_transcode.core.codecs import (
    TRANSCODE_AUDIO_CODECS,
    get_codecs_for_format,
    get_encoder_for_audio_codec,
    get_format_for_audio_codec,
    get_max_sample_rate_for_codec,
    get_supported_codecs,
    get_transcode_codecs,
    is_codec_compatible,
    is_sample_rate_exempt,
    is_supported,
    normalize_codec,
    sort_codecs,
)


class TestNormalizeCodec:
    """Tests for normalize_codec function."""

    def test_lowercases_and_strips(self) -> None:
        """Codec names are case and whitespace insensitive."""
        assert normalize_codec("  H264 ") == "h264"

    def test_resolves_aliases(self) -> None:
        """Aliases map to canonical names."""
        assert normalize_codec("avc1") == "h264"
        assert normalize_codec("h265") == "hevc"
        assert normalize_codec("srt") == "subrip"
        assert normalize_codec("pgssub") == "hdmv_pgs_subtitle"

    def test_collapses_families(self) -> None:
        """Suffixed PCM and DSD variants collapse to their family."""
        assert normalize_codec("pcm_s24le") == "pcm"
        assert normalize_codec("dsd_lsbf") == "dsd"

    def test_none_is_empty(self) -> None:
        """None normalizes to an empty string."""
        assert normalize_codec(None) == ""


class TestIsSupported:
    """Tests for is_supported function."""

    def test_alias_match(self) -> None:
        """A codec matches a list containing one of its aliases."""
        assert is_supported(["avc", "aac"], "h264")

    def test_no_match(self) -> None:
        """Absent codecs are not supported."""
        assert not is_supported(["h264"], "hevc")

    def test_none_list(self) -> None:
        """A missing list supports nothing."""
        assert not is_supported(None, "h264")

    def test_empty_codec(self) -> None:
        """An empty codec name is never supported."""
        assert not is_supported(["h264"], "")


class TestSortCodecs:
    """Tests for sort_codecs function."""

    def test_preferred_first_order_kept(self) -> None:
        """Preferred codecs move to the front, relative order preserved."""
        result = sort_codecs(["mp3", "flac", "aac", "pcm"], ["pcm", "flac"])
        assert result == ("flac", "pcm", "mp3", "aac")

    def test_no_preferred(self) -> None:
        """Lists without preferred codecs are unchanged."""
        assert sort_codecs(["mp3", "aac"], ["flac"]) == ("mp3", "aac")


class TestFormatLookups:
    """Tests for container and encoder lookups."""

    def test_hls_carries_h264_not_vp8(self) -> None:
        """HLS carries H.264 but not VP8."""
        assert is_codec_compatible("h264", "hls")
        assert not is_codec_compatible("vp8", "hls")

    def test_unknown_format_carries_nothing(self) -> None:
        """Unknown containers carry no codecs."""
        assert get_codecs_for_format("bogus") == ()
        assert get_codecs_for_format(None) == ()

    def test_format_case_insensitive(self) -> None:
        """Format lookups ignore case."""
        assert get_codecs_for_format("WEBM") == get_codecs_for_format("webm")

    def test_format_for_audio_codec(self) -> None:
        """Audio codecs map to their streaming containers."""
        assert get_format_for_audio_codec("flac") == "flac"
        assert get_format_for_audio_codec("aac") == "adts"
        assert get_format_for_audio_codec("vorbis") == "oga"

    def test_format_for_encoder_name(self) -> None:
        """Encoder names map back to the container of their codec."""
        assert get_format_for_audio_codec("libmp3lame") == "mp3"
        assert get_format_for_audio_codec("libopus") == "oga"

    def test_format_for_unknown_codec(self) -> None:
        """Unknown codecs have no container."""
        assert get_format_for_audio_codec("wmav2") is None

    def test_encoder_for_audio_codec(self) -> None:
        """Logical codecs map to encoder names."""
        assert get_encoder_for_audio_codec("mp3") == "libmp3lame"
        assert get_encoder_for_audio_codec("aac") == "aac"
        assert get_encoder_for_audio_codec("pcm") == "pcm_s16le"

    def test_every_transcodable_audio_codec_has_container(self) -> None:
        """Each transcodable audio codec can be streamed standalone."""
        for codec in TRANSCODE_AUDIO_CODECS:
            assert get_format_for_audio_codec(codec) is not None


class TestSampleRates:
    """Tests for sample rate helpers."""

    def test_codec_ceiling(self) -> None:
        """Codecs report their highest encodable rate."""
        assert get_max_sample_rate_for_codec("mp3") == 48000
        assert get_max_sample_rate_for_codec("flac") == 192000

    def test_unknown_codec_default(self) -> None:
        """Unknown codecs fall back to 48 kHz."""
        assert get_max_sample_rate_for_codec("wmav2") == 48000

    def test_dsd_exempt(self) -> None:
        """Only the DSD family is exempt from sample rate limits."""
        assert is_sample_rate_exempt("dsd_msbf")
        assert not is_sample_rate_exempt("flac")


class TestCatalogAccessors:
    """Tests for get_supported_codecs and get_transcode_codecs."""

    def test_transcodable_codecs_are_supported(self) -> None:
        """Everything the server produces it can also play."""
        supported = get_supported_codecs()
        for codec in get_transcode_codecs():
            assert codec in supported

    def test_transcode_codecs_contents(self) -> None:
        """Video targets come first, then audio targets."""
        codecs = get_transcode_codecs()
        assert codecs[:2] == ("h264", "vp8")
        assert "opus" in codecs

"""
Tests for video URL parsing and transcript fetching.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from youtube_transcript_api import NoTranscriptFound, TranscriptsDisabled, VideoUnavailable

from flowfocus.exceptions import (
    FlowFocusError,
    InvalidVideoUrlError,
    SubtitlesDisabledError,
    TranscriptError,
    TranscriptFetchError,
    TranscriptUnavailableError,
)
from flowfocus.transcripts import TranscriptFetcher, extract_video_id


def _api(result=None, error=None) -> MagicMock:
    api = MagicMock()
    if error is not None:
        api.fetch.side_effect = error
    else:
        api.fetch.return_value = result
    return api


class TestExtractVideoId:
    """Test cases for URL parsing."""

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=abc123",
        "https://youtube.com/watch?v=abc123&t=42s",
        "https://m.youtube.com/watch?feature=share&v=abc123",
        "https://youtu.be/abc123",
        "https://youtu.be/abc123?si=tracking",
        "https://www.youtube.com/shorts/abc123",
    ])
    def test_supported_forms(self, url: str) -> None:
        assert extract_video_id(url) == "abc123"

    @pytest.mark.parametrize("url", [
        "",
        "not a url",
        "youtube.com/watch?v=abc123",
        "https://www.youtube.com/",
        "https://youtu.be/",
        "https://example.com/watch?v=abc123",
    ])
    def test_unrecognised_urls(self, url: str) -> None:
        assert extract_video_id(url) is None


class TestTranscriptFetcher:
    """Test cases for transcript retrieval and error mapping."""

    def test_joins_snippets(self) -> None:
        api = _api([SimpleNamespace(text="hello"), SimpleNamespace(text="world")])

        text = TranscriptFetcher(api).fetch_transcript("https://youtu.be/abc123")

        assert text == "hello world"
        api.fetch.assert_called_once_with("abc123")

    def test_invalid_url_skips_lookup(self) -> None:
        api = _api([])

        with pytest.raises(InvalidVideoUrlError, match="valid video link"):
            TranscriptFetcher(api).fetch_transcript("https://example.com/video")

        api.fetch.assert_not_called()

    def test_empty_transcript(self) -> None:
        with pytest.raises(TranscriptUnavailableError, match="No transcript content"):
            TranscriptFetcher(_api([])).fetch_transcript("https://youtu.be/abc123")

    def test_subtitles_disabled(self) -> None:
        fetcher = TranscriptFetcher(_api(error=TranscriptsDisabled("abc123")))

        with pytest.raises(SubtitlesDisabledError, match="subtitles are disabled"):
            fetcher.fetch_transcript("https://youtu.be/abc123")

    def test_no_transcript(self) -> None:
        fetcher = TranscriptFetcher(_api(error=NoTranscriptFound("abc123", ["en"], None)))

        with pytest.raises(TranscriptUnavailableError, match="No transcripts are available"):
            fetcher.fetch_transcript("https://youtu.be/abc123")

    @pytest.mark.parametrize("error", [VideoUnavailable("abc123"), ConnectionError("offline")])
    def test_other_failures(self, error: Exception) -> None:
        fetcher = TranscriptFetcher(_api(error=error))

        with pytest.raises(TranscriptFetchError, match="Failed to fetch transcript"):
            fetcher.fetch_transcript("https://youtu.be/abc123")

    def test_transcript_errors_share_a_base(self) -> None:
        """Callers can catch every lookup failure at once."""
        for error_class in (InvalidVideoUrlError, SubtitlesDisabledError,
                            TranscriptUnavailableError, TranscriptFetchError):
            assert issubclass(error_class, TranscriptError)
            assert issubclass(error_class, FlowFocusError)

"""
FlowFocus Transcripts

This module resolves YouTube URLs to video ids and fetches their transcripts
as plain text for the transcript summarizer.
"""

import logging
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    YouTubeTranscriptApi,
)

from .exceptions import (
    InvalidVideoUrlError,
    SubtitlesDisabledError,
    TranscriptFetchError,
    TranscriptUnavailableError,
)

# Set up module logger
logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Failed to process YouTube URL. Please ensure it's a valid video link."
EMPTY_TRANSCRIPT_MESSAGE = "No transcript content found for this video. The creator may have disabled them."
SUBTITLES_DISABLED_MESSAGE = "Could not fetch transcript because subtitles are disabled for this video."
NO_TRANSCRIPT_MESSAGE = (
    "No transcripts are available for this video. This can happen with very new videos "
    "or if they are not in a supported language."
)
FETCH_FAILED_MESSAGE = "Failed to fetch transcript. The video might be private, very new, or have transcripts disabled."


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the video id from a YouTube URL.

    Supports ``youtube.com/watch?v=<id>``, ``youtu.be/<id>`` and
    ``youtube.com/shorts/<id>``.

    Args:
        url: Video URL

    Returns:
        The video id, or None when the URL is not a recognizable video link
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.netloc:
        return None

    hostname = parsed.hostname or ""

    if "youtube.com" in hostname:
        video_ids = parse_qs(parsed.query).get("v")
        if video_ids and video_ids[0]:
            return video_ids[0]

    if hostname == "youtu.be":
        video_id = parsed.path[1:].split("/")[0]
        if video_id:
            return video_id

    if "/shorts/" in parsed.path:
        video_id = parsed.path.split("/shorts/", 1)[1].split("/")[0]
        if video_id:
            return video_id

    return None


class TranscriptFetcher:
    """
    Fetches transcripts through ``youtube-transcript-api``.
    """

    def __init__(self, api: Optional[Any] = None) -> None:
        """
        Initialize the fetcher.

        Args:
            api: Object with a ``fetch(video_id)`` method; a
                ``YouTubeTranscriptApi`` instance when None
        """
        self.api = api or YouTubeTranscriptApi()

    def fetch_transcript(self, url: str) -> str:
        """
        Fetch the transcript of a video as one string.

        Args:
            url: Video URL

        Returns:
            Transcript snippet texts joined by single spaces

        Raises:
            InvalidVideoUrlError: If no video id can be found in the URL
            SubtitlesDisabledError: If the video has subtitles disabled
            TranscriptUnavailableError: If the video has no usable transcript
            TranscriptFetchError: For any other retrieval failure
        """
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidVideoUrlError(INVALID_URL_MESSAGE)

        try:
            transcript = self.api.fetch(video_id)
        except TranscriptsDisabled as e:
            logger.warning(f"Subtitles disabled for video {video_id}")
            raise SubtitlesDisabledError(SUBTITLES_DISABLED_MESSAGE) from e
        except NoTranscriptFound as e:
            logger.warning(f"No transcript found for video {video_id}")
            raise TranscriptUnavailableError(NO_TRANSCRIPT_MESSAGE) from e
        except (CouldNotRetrieveTranscript, OSError) as e:
            logger.error(f"Transcript retrieval failed for video {video_id}: {e}")
            raise TranscriptFetchError(FETCH_FAILED_MESSAGE) from e

        texts = [snippet.text for snippet in transcript]
        if not texts:
            raise TranscriptUnavailableError(EMPTY_TRANSCRIPT_MESSAGE)

        logger.info(f"Fetched transcript for video {video_id} ({len(texts)} snippets)")
        return " ".join(texts)


def fetch_transcript(url: str) -> str:
    """
    Fetch a transcript with a default ``TranscriptFetcher``.

    Args:
        url: Video URL

    Returns:
        Transcript text
    """
    return TranscriptFetcher().fetch_transcript(url)

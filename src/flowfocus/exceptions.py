"""
FlowFocus Exceptions

Error taxonomy shared by the storage layer, the collections, the AI flows
and the transcript boundary. Storage-parse errors never surface here; they
are logged and replaced by the default collection.
"""

from typing import List, Optional


class FlowFocusError(Exception):
    """Base class for all user-facing FlowFocus errors."""


class ImportFormatError(FlowFocusError, ValueError):
    """Raised when an imported collection does not have the expected shape."""


class FlowValidationError(FlowFocusError, ValueError):
    """
    Raised when the input of an AI flow does not conform to its schema.

    Attributes:
        fields: Dotted paths of the offending input fields
    """

    def __init__(self, flow_name: str, fields: List[str], details: Optional[str] = None) -> None:
        self.flow_name = flow_name
        self.fields = fields
        message = f"Invalid input for {flow_name}: {', '.join(fields) or 'input'}"
        if details:
            message += f" ({details})"
        super().__init__(message)


class GenerationError(FlowFocusError):
    """Raised when the text-generation call fails or returns malformed data."""


class TranscriptError(FlowFocusError):
    """Base class for transcript lookup failures."""


class InvalidVideoUrlError(TranscriptError):
    """The URL does not contain a recognizable video identifier."""


class SubtitlesDisabledError(TranscriptError):
    """The video owner disabled subtitles."""


class TranscriptUnavailableError(TranscriptError):
    """The video has no transcript in any supported language."""


class TranscriptFetchError(TranscriptError):
    """Any other failure while retrieving a transcript."""

"""
Error taxonomy for the video analysis pipeline.

Every failure the API reports to a caller is a VideoProcessingError. The
`kind` is exposed to clients as the X-Error-Code header; the response body
only carries the human-readable message.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_PROMPT = "empty_prompt"
    EMPTY_INPUT = "empty_input"
    RESOURCE_NOT_FOUND = "resource_not_found"
    FILE_PROCESSING = "file_processing"
    INVALID_MEDIA_TYPE = "invalid_media_type"
    URL_FETCH_FAILED = "url_fetch_failed"
    EMPTY_FIELD = "empty_field"
    INVALID_BASE64 = "invalid_base64"
    OFF_TOPIC_PROMPT = "off_topic_prompt"
    UPSTREAM_FAILURE = "upstream_failure"
    INVALID_REQUEST = "invalid_request"


class VideoProcessingError(Exception):
    """A request-level failure, reported to the caller as HTTP 400."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"VideoProcessingError({self.kind.value!r}, {self.message!r})"


class ModelClientError(Exception):
    """Raised by the model client for transport, status or payload failures."""

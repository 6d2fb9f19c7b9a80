"""Request checks that run before any media conversion or I/O."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from app.core.errors import ErrorKind, VideoProcessingError

EMPTY_PROMPT_MESSAGE = "Prompt cannot be empty."
EMPTY_FILE_NAME_MESSAGE = "File name cannot be empty."
EMPTY_FILES_MESSAGE = "Video files list cannot be empty."
EMPTY_URLS_MESSAGE = "Video URL list cannot be empty."
EMPTY_BASE64_MESSAGE = "Base64 video list cannot be empty."


def has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def validate_prompt(prompt: Optional[str]) -> Optional[VideoProcessingError]:
    if not has_text(prompt):
        return VideoProcessingError(ErrorKind.EMPTY_PROMPT, EMPTY_PROMPT_MESSAGE)
    return None


def validate_file_name(file_name: Optional[str]) -> Optional[VideoProcessingError]:
    if not has_text(file_name):
        return VideoProcessingError(ErrorKind.EMPTY_INPUT, EMPTY_FILE_NAME_MESSAGE)
    return None


def validate_items(items: Optional[Sequence[Any]], message: str) -> Optional[VideoProcessingError]:
    if not items:
        return VideoProcessingError(ErrorKind.EMPTY_INPUT, message)
    return None


def is_empty_upload(upload: Any) -> bool:
    """True when the upload is known to carry no bytes.

    Uploads without a recorded size are treated as non-empty here; the
    normalizer drops them later if reading yields nothing.
    """
    if upload is None:
        return True
    return getattr(upload, "size", None) == 0


def validate_uploads(uploads: Optional[Sequence[Any]]) -> Optional[VideoProcessingError]:
    if not uploads or all(is_empty_upload(u) for u in uploads):
        return VideoProcessingError(ErrorKind.EMPTY_INPUT, EMPTY_FILES_MESSAGE)
    return None

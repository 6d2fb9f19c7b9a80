"""
Video analysis service: validates requests, normalizes the four input shapes
into Media values and dispatches one multimodal call to the model.

Every step returns its failure as a value; the first failure short-circuits
the request and is carried out in the AnalysisOutcome. The API layer raises
it for the error handler.

Notes:
- The off-topic guardrail is an exact (case-insensitive) match on the model
  reply. It is a convenience for well-behaved models, not a security boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import httpx
from fastapi import UploadFile

from app.core.config import Settings, get_settings
from app.core.errors import ErrorKind, ModelClientError, VideoProcessingError
from app.core.logger import get_logger
from app.services import media_sources
from app.services.media import Media
from app.services.model_client import ChatModelClient
from app.services.validation import (
    EMPTY_BASE64_MESSAGE,
    EMPTY_URLS_MESSAGE,
    validate_file_name,
    validate_items,
    validate_prompt,
    validate_uploads,
)

log = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant that specializes in video analysis.\n"
    "Your task is to analyze the provided video file(s) and answer the user's question.\n"
    "Common tasks are describing scenes, identifying objects, or summarizing the content.\n"
    "If the user's prompt is not related to analyzing the video,\n"
    "respond with the exact phrase: 'Error: I can only analyze video and answer related questions.'\n"
)

OFF_TOPIC_REPLY = "Error: I can only analyze video and answer related questions."
OFF_TOPIC_MESSAGE = "The provided prompt is not related to video analysis."
NO_MEDIA_MESSAGE = "No valid video files were provided for analysis."
UPSTREAM_MESSAGE = "Video analysis failed: the model request could not be completed."


@dataclass(frozen=True)
class AnalysisOutcome:
    text: Optional[str] = None
    error: Optional[VideoProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: VideoProcessingError) -> "AnalysisOutcome":
        return cls(error=error)

    def unwrap(self) -> str:
        """Return the answer text, raising the carried error if there is one."""
        if self.error is not None:
            raise self.error
        return self.text or ""


def is_off_topic_reply(text: Optional[str]) -> bool:
    return text is not None and text.casefold() == OFF_TOPIC_REPLY.casefold()


def _first_failure(*checks: Optional[VideoProcessingError]) -> Optional[VideoProcessingError]:
    for check in checks:
        if check is not None:
            return check
    return None


class VideoAnalysisService:
    """Entry points for the four analysis scenarios.

    The model client and the HTTP client used to check video URLs are created
    once by the application and passed in; the service keeps no per-request
    state.
    """

    def __init__(
        self,
        model_client: ChatModelClient,
        http_client: httpx.AsyncClient,
        settings: Optional[Settings] = None,
    ) -> None:
        self._model = model_client
        self._http = http_client
        self._settings = settings or get_settings()
        self._resource_root = media_sources.resolve_resource_root(self._settings.VIDEO_RESOURCE_DIR)
        self._url_timeout = media_sources.url_check_timeout(
            self._settings.URL_CONNECT_TIMEOUT, self._settings.URL_READ_TIMEOUT
        )

    @property
    def resource_root(self) -> Path:
        return self._resource_root

    async def analyze_from_classpath(self, file_name: Optional[str], prompt: Optional[str]) -> AnalysisOutcome:
        failure = _first_failure(validate_prompt(prompt), validate_file_name(file_name))
        if failure is not None:
            return AnalysisOutcome.failed(failure)

        conv = media_sources.media_from_resource(file_name, self._resource_root)
        if not conv.ok:
            return AnalysisOutcome.failed(conv.error)
        return await self.perform_analysis(prompt, [conv.media])

    async def analyze_from_files(self, uploads: Optional[Sequence[UploadFile]], prompt: Optional[str]) -> AnalysisOutcome:
        failure = _first_failure(validate_prompt(prompt), validate_uploads(uploads))
        if failure is not None:
            return AnalysisOutcome.failed(failure)

        batch = await media_sources.media_from_uploads(uploads)
        if not batch.ok:
            return AnalysisOutcome.failed(batch.error)
        return await self.perform_analysis(prompt, batch.media)

    async def analyze_from_urls(self, urls: Optional[Sequence[str]], prompt: Optional[str]) -> AnalysisOutcome:
        failure = _first_failure(validate_prompt(prompt), validate_items(urls, EMPTY_URLS_MESSAGE))
        if failure is not None:
            return AnalysisOutcome.failed(failure)

        batch = await media_sources.media_from_urls(urls, self._http, self._url_timeout)
        if not batch.ok:
            return AnalysisOutcome.failed(batch.error)
        return await self.perform_analysis(prompt, batch.media)

    async def analyze_from_base64(self, items: Optional[Sequence[Any]], prompt: Optional[str]) -> AnalysisOutcome:
        failure = _first_failure(validate_prompt(prompt), validate_items(items, EMPTY_BASE64_MESSAGE))
        if failure is not None:
            return AnalysisOutcome.failed(failure)

        batch = media_sources.media_from_base64_items(items)
        if not batch.ok:
            return AnalysisOutcome.failed(batch.error)
        return await self.perform_analysis(prompt, batch.media)

    async def perform_analysis(self, prompt: str, media: List[Media]) -> AnalysisOutcome:
        """Send the prompt and media to the model and apply the guardrail."""
        if not media:
            return AnalysisOutcome.failed(VideoProcessingError(ErrorKind.EMPTY_INPUT, NO_MEDIA_MESSAGE))

        log.info("Dispatching video analysis with %d media item(s) to %s", len(media), self._model.model)
        try:
            reply = await self._model.acomplete(SYSTEM_PROMPT, prompt, media)
        except ModelClientError as e:
            log.exception("Model call failed: %s", e)
            return AnalysisOutcome.failed(VideoProcessingError(ErrorKind.UPSTREAM_FAILURE, UPSTREAM_MESSAGE))

        if is_off_topic_reply(reply):
            log.warning("Model declined an off-topic prompt")
            return AnalysisOutcome.failed(VideoProcessingError(ErrorKind.OFF_TOPIC_PROMPT, OFF_TOPIC_MESSAGE))

        return AnalysisOutcome(text=reply)

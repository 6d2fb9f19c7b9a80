"""
Conversions from the four supported input shapes into Media values.

- bundled resource: a file under the video resource root, always video/mp4
- uploaded file: declared content type mapped through VideoMimeType
- remote URL: Content-Type checked up front, body fetched lazily
- Base64 payload: decoded in memory, caller's MIME type kept as-is

Conversions return results instead of raising; batch helpers stop at the
first failure and report it.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

import httpx
from fastapi import UploadFile

from app.core.errors import ErrorKind, VideoProcessingError
from app.core.logger import get_logger
from app.services.media import (
    DEFAULT_VIDEO_MIME_TYPE,
    BytesResource,
    FileResource,
    Media,
    UrlResource,
    determine_video_mime_type,
)
from app.services.validation import has_text, is_empty_upload

log = get_logger(__name__)

PACKAGE_RESOURCE_ROOT = Path(__file__).resolve().parent.parent / "resources" / "video"


@dataclass(frozen=True)
class Conversion:
    media: Optional[Media] = None
    error: Optional[VideoProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, media: Media) -> "Conversion":
        return cls(media=media)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Conversion":
        log.warning("Media conversion failed (%s): %s", kind.value, message)
        return cls(error=VideoProcessingError(kind, message))


@dataclass(frozen=True)
class MediaBatch:
    media: List[Media] = field(default_factory=list)
    error: Optional[VideoProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _collect(conversions: Iterable[Conversion]) -> MediaBatch:
    media: List[Media] = []
    for conv in conversions:
        if not conv.ok:
            return MediaBatch(error=conv.error)
        if conv.media is not None:
            media.append(conv.media)
    return MediaBatch(media=media)


# -------------------------
# Bundled resources
# -------------------------
def resolve_resource_root(configured: Optional[str] = None) -> Path:
    if configured:
        return Path(configured)
    return PACKAGE_RESOURCE_ROOT


def media_from_resource(file_name: str, root: Path) -> Conversion:
    """Look up a bundled video by name; the type is always video/mp4."""
    try:
        base = root.resolve()
        candidate = (base / file_name).resolve()
        found = base in candidate.parents and candidate.is_file()
    except (OSError, ValueError) as e:
        # embedded NUL, over-long names
        log.warning("Unusable resource name %r: %s", file_name, e)
        found = False
    if not found:
        return Conversion.failure(
            ErrorKind.RESOURCE_NOT_FOUND, f"File not found in classpath: video/{file_name}"
        )
    return Conversion.success(Media(DEFAULT_VIDEO_MIME_TYPE.value, FileResource(candidate)))


# -------------------------
# Uploaded files
# -------------------------
async def media_from_upload(upload: UploadFile) -> Conversion:
    """Read one uploaded file into memory.

    Returns an empty Conversion (no media, no error) when the upload turns
    out to hold zero bytes.
    """
    try:
        data = await upload.read()
    except Exception as e:
        log.exception("Failed reading upload %s: %s", upload.filename, e)
        return Conversion.failure(
            ErrorKind.FILE_PROCESSING, f"Failed to process uploaded file: {upload.filename}"
        )
    if not data:
        return Conversion()
    mime = determine_video_mime_type(upload.content_type)
    return Conversion.success(Media(mime.value, BytesResource(data, filename=upload.filename)))


async def media_from_uploads(uploads: Iterable[UploadFile]) -> MediaBatch:
    media: List[Media] = []
    for upload in uploads:
        if is_empty_upload(upload):
            continue
        conv = await media_from_upload(upload)
        if not conv.ok:
            return MediaBatch(error=conv.error)
        if conv.media is not None:
            media.append(conv.media)
    return MediaBatch(media=media)


# -------------------------
# Remote URLs
# -------------------------
def url_check_timeout(connect: float = 10.0, read: float = 10.0) -> httpx.Timeout:
    return httpx.Timeout(connect=connect, read=read, write=read, pool=connect)


async def media_from_url(url: str, client: httpx.AsyncClient, timeout: httpx.Timeout) -> Conversion:
    """Check that a URL serves video and bind a lazily-fetched resource to it.

    Only the response headers are consumed; the body is downloaded when the
    model request is built.
    """
    log.info("Processing video from URL: %s", url)
    try:
        async with client.stream("GET", url, timeout=timeout, follow_redirects=True) as resp:
            resp.raise_for_status()
            content_type = resp.headers.get("content-type")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.warning("URL check failed for %s: %s", url, e)
        return Conversion.failure(
            ErrorKind.URL_FETCH_FAILED, f"Failed to download or process video from URL: {url}"
        )

    if not content_type or not content_type.strip().lower().startswith("video/"):
        return Conversion.failure(
            ErrorKind.INVALID_MEDIA_TYPE, f"Invalid or non-video MIME type for URL: {url}"
        )
    mime = content_type.split(";", 1)[0].strip()
    return Conversion.success(Media(mime, UrlResource(url, client=client, timeout=timeout)))


async def media_from_urls(urls: Iterable[str], client: httpx.AsyncClient, timeout: httpx.Timeout) -> MediaBatch:
    media: List[Media] = []
    for url in urls:
        conv = await media_from_url(url, client, timeout)
        if not conv.ok:
            return MediaBatch(error=conv.error)
        media.append(conv.media)
    return MediaBatch(media=media)


# -------------------------
# Base64 payloads
# -------------------------
def decode_base64(data: str) -> bytes:
    """Strictly decode Base64, accepting a data URL prefix and missing padding.

    Raises binascii.Error or ValueError on malformed input.
    """
    payload = data.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1].strip()
    if not payload:
        raise ValueError("empty Base64 payload")
    payload += "=" * (-len(payload) % 4)
    return base64.b64decode(payload, validate=True)


def media_from_base64(mime_type: Optional[str], data: Optional[str]) -> Conversion:
    if not has_text(mime_type) or not has_text(data):
        return Conversion.failure(
            ErrorKind.EMPTY_FIELD, "Base64 video data and MIME type cannot be empty."
        )
    try:
        raw = decode_base64(data)
    except (binascii.Error, ValueError):
        return Conversion.failure(ErrorKind.INVALID_BASE64, "Invalid Base64 data provided.")
    return Conversion.success(Media(mime_type.strip(), BytesResource(raw)))


def media_from_base64_items(items: Iterable[Any]) -> MediaBatch:
    """Convert objects exposing `mime_type` and `data` attributes."""
    return _collect(media_from_base64(item.mime_type, item.data) for item in items)

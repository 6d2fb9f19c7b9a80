"""
Normalized media values handed to the model client.

A Media pairs a MIME type with a byte-accessible resource. Resources are
read lazily: bundled files are read from disk and URL resources are
downloaded only when the model request is assembled.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Protocol

import httpx


class VideoMimeType(str, Enum):
    MP4 = "video/mp4"
    WEBM = "video/webm"
    QUICKTIME = "video/quicktime"
    WMV = "video/x-ms-wmv"
    AVI = "video/x-msvideo"
    FLV = "video/x-flv"
    MKV = "video/x-matroska"
    MP2T = "video/mp2t"


DEFAULT_VIDEO_MIME_TYPE = VideoMimeType.MP4

# Declared upload content types (lower-cased) -> supported video type
_MIME_LOOKUP: Dict[str, VideoMimeType] = {
    "video/mp4": VideoMimeType.MP4,
    "video/webm": VideoMimeType.WEBM,
    "video/quicktime": VideoMimeType.QUICKTIME,
    "video/mov": VideoMimeType.QUICKTIME,
    "video/x-ms-wmv": VideoMimeType.WMV,
    "video/wmv": VideoMimeType.WMV,
    "video/x-msvideo": VideoMimeType.AVI,
    "video/avi": VideoMimeType.AVI,
    "video/x-flv": VideoMimeType.FLV,
    "video/flv": VideoMimeType.FLV,
    "video/x-matroska": VideoMimeType.MKV,
    "video/mkv": VideoMimeType.MKV,
    "video/mp2t": VideoMimeType.MP2T,
    "video/mts": VideoMimeType.MP2T,
    # AVCHD shares the MPEG transport stream container
    "video/x-avchd": VideoMimeType.MP2T,
    "video/avchd": VideoMimeType.MP2T,
}


def determine_video_mime_type(content_type: Optional[str]) -> VideoMimeType:
    """Map a declared content type to a supported video type, defaulting to mp4."""
    if content_type is None:
        return DEFAULT_VIDEO_MIME_TYPE
    return _MIME_LOOKUP.get(content_type.strip().lower(), DEFAULT_VIDEO_MIME_TYPE)


class MediaResource(Protocol):
    async def read(self) -> bytes:
        ...


@dataclass(frozen=True)
class BytesResource:
    data: bytes
    filename: Optional[str] = None

    async def read(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class FileResource:
    path: Path

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


@dataclass(frozen=True)
class UrlResource:
    url: str
    client: httpx.AsyncClient = field(repr=False, compare=False)
    timeout: Optional[httpx.Timeout] = field(default=None, repr=False, compare=False)

    async def read(self) -> bytes:
        if self.timeout is None:
            resp = await self.client.get(self.url, follow_redirects=True)
        else:
            resp = await self.client.get(self.url, timeout=self.timeout, follow_redirects=True)
        resp.raise_for_status()
        return resp.content


@dataclass(frozen=True)
class Media:
    mime_type: str
    content: MediaResource

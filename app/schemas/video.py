from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoAnalysisRequest(BaseModel):
    """JSON body for the bundled-resource and URL scenarios.

    - `fileName`: name of a bundled video (bundled-resource scenario only)
    - `videoUrls`: one or more remote video URLs (URL scenario only)
    - `prompt`: the question to ask about the video(s)

    All fields are optional at the schema level so that missing values reach
    the request checks and get the same 400 response as blank ones.
    """

    model_config = ConfigDict(populate_by_name=True)

    video_urls: Optional[List[str]] = Field(default=None, alias="videoUrls")
    prompt: Optional[str] = None
    file_name: Optional[str] = Field(default=None, alias="fileName")


class Base64Video(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mime_type: Optional[str] = Field(default=None, alias="mimeType")  # e.g. video/mp4
    data: Optional[str] = None


class Base64VideoAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base64_video_list: Optional[List[Base64Video]] = Field(default=None, alias="base64VideoList")
    prompt: Optional[str] = None


class VideoAnalysisResponse(BaseModel):
    """Model answer on success, error message on failure."""

    response: str

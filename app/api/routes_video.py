from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.dependencies import get_video_analysis_service
from app.schemas.video import (
    Base64VideoAnalysisRequest,
    VideoAnalysisRequest,
    VideoAnalysisResponse,
)
from app.services.video_analysis import VideoAnalysisService

router = APIRouter()


@router.post("/from-classpath", response_model=VideoAnalysisResponse)
async def analyze_from_classpath(
    request: VideoAnalysisRequest,
    service: VideoAnalysisService = Depends(get_video_analysis_service),
):
    """Analyze a single video bundled with the application."""
    outcome = await service.analyze_from_classpath(request.file_name, request.prompt)
    return VideoAnalysisResponse(response=outcome.unwrap())


@router.post("/from-files", response_model=VideoAnalysisResponse)
async def analyze_from_files(
    video_files: Optional[List[UploadFile]] = File(None, alias="videoFiles"),
    prompt: Optional[str] = Form(None),
    service: VideoAnalysisService = Depends(get_video_analysis_service),
):
    """Analyze one or more videos uploaded as multipart/form-data."""
    outcome = await service.analyze_from_files(video_files, prompt)
    return VideoAnalysisResponse(response=outcome.unwrap())


@router.post("/from-urls", response_model=VideoAnalysisResponse)
async def analyze_from_urls(
    request: VideoAnalysisRequest,
    service: VideoAnalysisService = Depends(get_video_analysis_service),
):
    """Analyze one or more videos served from remote URLs."""
    outcome = await service.analyze_from_urls(request.video_urls, request.prompt)
    return VideoAnalysisResponse(response=outcome.unwrap())


@router.post("/from-base64", response_model=VideoAnalysisResponse)
async def analyze_from_base64(
    request: Base64VideoAnalysisRequest,
    service: VideoAnalysisService = Depends(get_video_analysis_service),
):
    """Analyze one or more videos sent inline as Base64 strings."""
    outcome = await service.analyze_from_base64(request.base64_video_list, request.prompt)
    return VideoAnalysisResponse(response=outcome.unwrap())

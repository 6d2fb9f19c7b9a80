from fastapi import Request

from app.services.video_analysis import VideoAnalysisService


def get_video_analysis_service(request: Request) -> VideoAnalysisService:
    """Return the service instance created in the application lifespan."""
    return request.app.state.video_analysis

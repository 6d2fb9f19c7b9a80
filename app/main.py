from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

import httpx

from app.api import routes_health, routes_video
from app.api.errors import register_error_handlers
from app.core.config import get_settings
from app.core.logger import get_logger
from app.services.model_client import ChatModelClient
from app.services.video_analysis import VideoAnalysisService

log = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one model client and one URL-check client shared by all requests
    model_client = ChatModelClient()
    http_client = httpx.AsyncClient()
    app.state.video_analysis = VideoAnalysisService(model_client, http_client, settings)
    if not model_client.api_key:
        log.warning("OPENAI_API_KEY is not set; model calls will be rejected upstream")
    log.info("Video analysis ready (model=%s, resources=%s)", model_client.model, app.state.video_analysis.resource_root)
    try:
        yield
    finally:
        # Shutdown
        await model_client.aclose()
        await http_client.aclose()


app = FastAPI(
    title="Video Analysis API",
    description="Multimodal LLM video analysis over bundled files, uploads, URLs and Base64 payloads",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(routes_video.router, prefix="/api/v1/video/analysis", tags=["Video Analysis"])
app.include_router(routes_health.router, prefix="/health", tags=["Health"])

@app.get("/")
def root():
    return {"status": "Video analysis backend running"}

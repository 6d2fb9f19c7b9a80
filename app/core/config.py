import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # OpenAI-compatible multimodal endpoint
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    OPENAI_MODEL: str = "gemini-2.5-flash"
    MODEL_TEMPERATURE: Optional[float] = None
    MODEL_TIMEOUT: float = 120.0

    # Remote video probing
    URL_CONNECT_TIMEOUT: float = 10.0
    URL_READ_TIMEOUT: float = 10.0
    # Send URL media to the model as references instead of inlining the bytes
    FORWARD_URLS_BY_REFERENCE: bool = False

    # Bundled videos; empty means app/resources/video
    VIDEO_RESOURCE_DIR: str = ""

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # General
    ENV: str = os.getenv("ENV", "development")
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Ensure .env is loaded once
    load_dotenv(override=False)
    return Settings()

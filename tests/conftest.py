import os
from typing import Callable, List, Optional

import httpx
import pytest

# Keep tests local-only: no real key, no .env surprises.
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["OPENAI_BASE_URL"] = "https://llm.test/v1"
os.environ["OPENAI_MODEL"] = "test-model"

from app.core.config import Settings, get_settings  # noqa: E402
from app.core.errors import ModelClientError  # noqa: E402
from app.services.video_analysis import VideoAnalysisService  # noqa: E402

get_settings.cache_clear()


class FakeModelClient:
    """Stands in for ChatModelClient; records every call."""

    model = "fake-model"

    def __init__(self, reply: str = "A short clip.", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def acomplete(self, system_prompt, user_text, media):
        self.calls.append({"system": system_prompt, "prompt": user_text, "media": list(media)})
        if self.error is not None:
            raise self.error
        return self.reply


def _no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.fixture
def video_dir(tmp_path):
    root = tmp_path / "video"
    root.mkdir()
    (root / "sample.mp4").write_bytes(b"\x00")
    return root


@pytest.fixture
def fake_model():
    return FakeModelClient()


@pytest.fixture
def make_service(video_dir, fake_model):
    """Build a service around the fake model and a mocked URL transport."""

    def _make(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None, model=None):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler or _no_network))
        settings = Settings(VIDEO_RESOURCE_DIR=str(video_dir))
        return VideoAnalysisService(model or fake_model, http_client, settings)

    return _make


@pytest.fixture
def failing_model():
    return FakeModelClient(error=ModelClientError("Model request failed with HTTP 429"))

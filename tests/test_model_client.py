import base64
import json

import httpx
import pytest

from app.core.errors import ModelClientError
from app.services.media import BytesResource, FileResource, Media, UrlResource
from app.services.model_client import ChatModelClient


def _completion(content):
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _client(handler, **kwargs):
    return ChatModelClient(
        api_key="sk-test",
        base_url="https://llm.test/v1/",
        model="vision-model",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_acomplete_sends_system_prompt_text_and_media():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("A short clip."))

    client = _client(handler)
    media = [
        Media("video/mp4", BytesResource(b"one")),
        Media("video/webm", BytesResource(b"two")),
    ]
    out = await client.acomplete("be a video analyst", "Describe this video", media)
    await client.aclose()

    assert out == "A short clip."
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    body = seen["body"]
    assert body["model"] == "vision-model"
    assert "temperature" not in body
    system, user = body["messages"]
    assert system == {"role": "system", "content": "be a video analyst"}
    assert user["role"] == "user"
    assert user["content"][0] == {"type": "text", "text": "Describe this video"}
    first, second = user["content"][1:]
    assert first["type"] == "file"
    assert first["file"]["format"] == "video/mp4"
    assert first["file"]["file_data"] == "data:video/mp4;base64," + base64.b64encode(b"one").decode()
    assert second["file"]["format"] == "video/webm"


@pytest.mark.asyncio
async def test_url_media_inlined_by_default_and_referenced_when_enabled():
    bodies = []

    def handler(request):
        if request.url.host == "cdn.test":
            return httpx.Response(200, content=b"remote-video")
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_completion("ok"))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as fetcher:
        media = [Media("video/mp4", UrlResource("https://cdn.test/v.mp4", client=fetcher))]

        inline = _client(handler, forward_urls_by_reference=False, temperature=0.2)
        await inline.acomplete("sys", "what happens?", media)
        await inline.aclose()

        by_ref = _client(handler, forward_urls_by_reference=True)
        await by_ref.acomplete("sys", "what happens?", media)
        await by_ref.aclose()

    inline_part = bodies[0]["messages"][1]["content"][1]["file"]
    assert inline_part["file_data"] == "data:video/mp4;base64," + base64.b64encode(b"remote-video").decode()
    assert bodies[0]["temperature"] == 0.2
    ref_part = bodies[1]["messages"][1]["content"][1]["file"]
    assert ref_part == {"file_id": "https://cdn.test/v.mp4", "format": "video/mp4"}


@pytest.mark.asyncio
async def test_content_parts_are_joined():
    def handler(request):
        return httpx.Response(200, json=_completion([{"type": "text", "text": "A "}, {"type": "text", "text": "dog."}]))

    client = _client(handler)
    assert await client.acomplete("sys", "p", [Media("video/mp4", BytesResource(b"x"))]) == "A dog."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(429, json={"error": {"message": "rate limited"}}),
        httpx.Response(401, json={"error": {"message": "bad key"}}),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, content=b"not json"),
    ],
)
async def test_failures_raise_model_client_error(response):
    client = _client(lambda request: response)
    with pytest.raises(ModelClientError):
        await client.acomplete("sys", "p", [Media("video/mp4", BytesResource(b"x"))])


@pytest.mark.asyncio
async def test_transport_error_raises_model_client_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(handler)
    with pytest.raises(ModelClientError):
        await client.acomplete("sys", "p", [Media("video/mp4", BytesResource(b"x"))])


@pytest.mark.asyncio
async def test_unreadable_file_media_raises_model_client_error(tmp_path):
    def handler(request):
        raise AssertionError("model must not be called when media cannot be read")

    path = tmp_path / "gone.mp4"
    path.write_bytes(b"\x00")
    media = [Media("video/mp4", FileResource(path))]
    path.unlink()

    client = _client(handler)
    with pytest.raises(ModelClientError):
        await client.acomplete("sys", "p", media)


def test_defaults_come_from_settings():
    client = ChatModelClient()
    assert client.api_key == "test-key"
    assert client.base_url == "https://llm.test/v1"
    assert client.model == "test-model"

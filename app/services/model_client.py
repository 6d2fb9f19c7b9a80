"""
OpenAI-compatible chat-completions client (async, httpx) for multimodal calls.

One instance is created at application startup and shared by every request;
it holds connection settings only. Endpoint, model and API key are loaded from
environment variables via app.core.config.get_settings.
"""

from __future__ import annotations

import base64
import os
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.config import get_settings
from app.core.errors import ModelClientError
from app.core.logger import get_logger
from app.services.media import Media, UrlResource

log = get_logger(__name__)


class ChatModelClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        forward_urls_by_reference: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        # Prefer explicit arg, then settings, then env var (fallback)
        self.api_key = api_key or settings.OPENAI_API_KEY or os.getenv("OPENAI_API_KEY", "")
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.MODEL_TEMPERATURE
        self.forward_urls_by_reference = (
            settings.FORWARD_URLS_BY_REFERENCE if forward_urls_by_reference is None else forward_urls_by_reference
        )
        self._timeout = timeout if timeout is not None else settings.MODEL_TIMEOUT
        self._transport = transport
        self._aclient: Optional[httpx.AsyncClient] = None

    def _get_async_client(self) -> httpx.AsyncClient:
        if self._aclient is None:
            self._aclient = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._aclient

    async def _media_part(self, media: Media) -> Dict[str, Any]:
        if self.forward_urls_by_reference and isinstance(media.content, UrlResource):
            return {"type": "file", "file": {"file_id": media.content.url, "format": media.mime_type}}
        data = await media.content.read()
        data_url = f"data:{media.mime_type};base64,{base64.b64encode(data).decode()}"
        return {"type": "file", "file": {"file_data": data_url, "format": media.mime_type}}

    async def build_payload(self, system_prompt: str, user_text: str, media: Sequence[Media]) -> Dict[str, Any]:
        """Assemble the chat-completions body: system turn, then one user turn
        carrying the prompt text followed by every media attachment."""
        content: List[Dict[str, Any]] = [{"type": "text", "text": user_text}]
        for item in media:
            content.append(await self._media_part(item))

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": content},
            ],
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload

    async def acomplete(self, system_prompt: str, user_text: str, media: Sequence[Media]) -> str:
        """Send one multimodal request and return the completion text.

        Raises:
            ModelClientError: on transport errors, non-2xx responses, or a
                response body without a completion.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            payload = await self.build_payload(system_prompt, user_text, media)
            client = self._get_async_client()
            resp = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ModelClientError(f"Model request failed with HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ModelClientError(f"Model request failed: {e}") from e
        except OSError as e:
            raise ModelClientError(f"Failed to read media for the model request: {e}") from e

        return _extract_text(data)

    async def aclose(self) -> None:
        if self._aclient is not None:
            await self._aclient.aclose()
            self._aclient = None


def _extract_text(data: Any) -> str:
    try:
        message = data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as e:
        raise ModelClientError("Model response did not contain a completion") from e

    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content
    # Some providers return content as a list of typed parts
    if isinstance(content, list):
        parts = [p.get("text") for p in content if isinstance(p, dict) and isinstance(p.get("text"), str)]
        return "".join(parts)
    return ""

"""
Image generation through the AI Gateway (OpenAI-compatible chat completions).

Image models answer a chat completion with the picture attached to the
assistant message; we hand it back as a data URL so it can be embedded
directly in the generated site.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..exceptions import ImageGenerationError
from ..logger import logger


def _as_data_url(value: str, media_type: str = "image/png") -> str:
    if value.startswith("data:") or value.startswith("http://") or value.startswith("https://"):
        return value
    return f"data:{media_type};base64,{value}"


def extract_image_url(response: Any) -> Optional[str]:
    """
    Pull the first image out of a chat completion response.

    Looks at, in order:
      1. choices[0].message.images[*].image_url.url
      2. choices[0].message.content[*] parts of type "image_url"
      3. data[*].b64_json (images API shape)
    """
    if not isinstance(response, dict):
        return None

    choices = response.get("choices") or []
    message = choices[0].get("message") if choices and isinstance(choices[0], dict) else None
    if isinstance(message, dict):
        for image in message.get("images") or []:
            url = (image.get("image_url") or {}).get("url") if isinstance(image, dict) else None
            if isinstance(url, str) and url:
                return _as_data_url(url)

        content = message.get("content")
        if isinstance(content, list):
            for part in content:
                if not isinstance(part, dict) or part.get("type") != "image_url":
                    continue
                url = (part.get("image_url") or {}).get("url")
                if isinstance(url, str) and url:
                    return _as_data_url(url)

    for item in response.get("data") or []:
        b64 = item.get("b64_json") if isinstance(item, dict) else None
        if isinstance(b64, str) and b64:
            return _as_data_url(b64)

    return None


class ImageGatewayClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "ImageGatewayClient":
        return cls(
            api_key=settings.AI_GATEWAY_API_KEY,
            base_url=settings.AI_GATEWAY_BASE_URL,
            model=settings.IMAGE_MODEL,
            timeout=settings.IMAGE_TIMEOUT_SECONDS,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def generate_image(self, prompt: str) -> str:
        """Generate one image and return it as a data URL."""
        if not self.api_key:
            raise ImageGenerationError("AI_GATEWAY_API_KEY not set on server")

        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["image", "text"],
            "stream": False,
        }
        try:
            async with self._client() as client:
                resp = await client.post("/chat/completions", json=body)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ImageGenerationError(
                f"Image model returned HTTP {e.response.status_code}: {e.response.text[:300]}"
            )
        except (httpx.HTTPError, ValueError) as e:
            raise ImageGenerationError(f"Image request failed: {e}")

        url = extract_image_url(data)
        if not url:
            raise ImageGenerationError("No image returned in response")

        logger.info(
            "Image generated",
            extra={"model": self.model, "image_url_length": len(url)},
        )
        return url

    async def get_credits(self) -> Dict[str, Any]:
        if not self.api_key:
            raise ImageGenerationError("AI_GATEWAY_API_KEY not set on server")
        try:
            async with self._client() as client:
                resp = await client.get("/credits")
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            raise ImageGenerationError(f"Gateway returned HTTP {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            raise ImageGenerationError(f"Gateway request failed: {e}")

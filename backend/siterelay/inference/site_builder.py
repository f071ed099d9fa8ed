"""
v0 Platform API client plus the response parsing for chat/site results.

The chat payload shape has drifted between API versions, so the chat id and
the preview URL are looked up through fixed, ordered field lists.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..exceptions import SiteGenerationError
from ..logger import logger


CHAT_ID_FIELDS = ("id", "chatId", "chat_id")
SITE_URL_FIELDS = ("demo", "webUrl", "url")


def _first_string(data: Dict[str, Any], fields) -> Optional[str]:
    for field in fields:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def extract_chat_id(response: Any, fallback: Optional[str] = None) -> Optional[str]:
    """id, chatId, chat_id, else `fallback` (the chat id the caller sent)."""
    if isinstance(response, dict):
        chat_id = _first_string(response, CHAT_ID_FIELDS)
        if chat_id:
            return chat_id
    return fallback or None


def extract_site_url(response: Any) -> Optional[str]:
    """demo, webUrl, url, then latestVersion.demoUrl."""
    if not isinstance(response, dict):
        return None
    url = _first_string(response, SITE_URL_FIELDS)
    if url:
        return url
    latest = response.get("latestVersion")
    if isinstance(latest, dict):
        return _first_string(latest, ("demoUrl",))
    return None


class SiteBuilderClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 600.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "SiteBuilderClient":
        return cls(
            api_key=settings.V0_API_KEY,
            base_url=settings.V0_BASE_URL,
            timeout=settings.SITE_TIMEOUT_SECONDS,
        )

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise SiteGenerationError("V0_API_KEY not set on server")
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                resp = await client.post(path, json=body)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise SiteGenerationError(
                f"v0 returned HTTP {e.response.status_code}: {e.response.text[:300]}"
            )
        except (httpx.HTTPError, ValueError) as e:
            raise SiteGenerationError(f"v0 request failed: {e}")

        if not isinstance(data, dict):
            raise SiteGenerationError("v0 returned an unexpected response body")
        return data

    async def create_chat(self, message: str) -> Dict[str, Any]:
        logger.info("Creating v0 chat", extra={"message_length": len(message)})
        return await self._post("/chats", {"message": message})

    async def send_message(self, chat_id: str, message: str) -> Dict[str, Any]:
        logger.info(
            "Sending message to v0 chat",
            extra={"chat_id": chat_id, "message_length": len(message)},
        )
        return await self._post(f"/chats/{chat_id}/messages", {"message": message})

from __future__ import annotations

from typing import Optional

import httpx

from ..config import Settings, settings as default_settings
from ..logger import logger
from ..schemas import CallbackPayload


class CallbackNotifier:
    """
    Delivers a finished job to the caller's webhook.

    One attempt per job. Delivery problems are logged and reported through
    the return value only; the job record is already final at this point.
    """

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "CallbackNotifier":
        return cls(timeout=settings.CALLBACK_TIMEOUT_SECONDS)

    async def notify(self, callback_url: str, payload: CallbackPayload) -> bool:
        log_extra = {
            "job_id": payload.job_id,
            "row_id": payload.row_id,
            "status": payload.status.value,
            "callback_url": callback_url,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(callback_url, json=payload.model_dump(mode="json"))
                resp.raise_for_status()
        except Exception as e:
            logger.error(f"Callback failed: {e}", extra=log_extra)
            return False

        logger.info("Callback delivered", extra={**log_extra, "http_status": resp.status_code})
        return True

import json

import httpx
import pytest

from siterelay.config import settings
from siterelay.services.callbacks import CallbackNotifier
from siterelay.services.job_store import InMemoryJobStore
from siterelay.services.orchestrator import JobOrchestrator


class FakeImageClient:
    def __init__(self, error=None):
        self.error = error
        self.prompts = []

    async def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return f"data:image/png;base64,aW1n{len(self.prompts)}"


class FakeSiteClient:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"id": "c1", "demo": "https://demo.test/c1"}
        self.error = error
        self.calls = []
        self.release = None

    async def create_chat(self, message):
        self.calls.append(("create", None, message))
        return await self._respond()

    async def send_message(self, chat_id, message):
        self.calls.append(("send", chat_id, message))
        return await self._respond()

    async def _respond(self):
        if self.release is not None:
            await self.release.wait()
        if self.error:
            raise self.error
        return self.response


class CallbackRecorder:
    """MockTransport handler capturing webhook deliveries."""

    def __init__(self, status_code=200):
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": True})

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def image_client():
    return FakeImageClient()


@pytest.fixture
def site_client():
    return FakeSiteClient()


@pytest.fixture
def callbacks():
    return CallbackRecorder()


@pytest.fixture
def notifier(callbacks):
    return CallbackNotifier(timeout=5, transport=httpx.MockTransport(callbacks))


@pytest.fixture
def orchestrator(store, image_client, site_client, notifier):
    return JobOrchestrator(
        store=store,
        image_client=image_client,
        site_client=site_client,
        notifier=notifier,
        generate_images=True,
    )


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "test-key")
    monkeypatch.setattr(settings, "V0_API_KEY", "v0-key")
    monkeypatch.setattr(settings, "AI_GATEWAY_API_KEY", "gw-key")
    monkeypatch.setattr(settings, "GENERATE_IMAGES", True)
    return settings


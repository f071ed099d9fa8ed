import json

import httpx
import pytest

from siterelay.exceptions import SiteGenerationError
from siterelay.inference.site_builder import SiteBuilderClient, extract_chat_id, extract_site_url


def test_extract_site_url_priority():
    assert extract_site_url({"demo": "https://d", "webUrl": "https://w", "url": "https://u"}) == "https://d"
    assert extract_site_url({"webUrl": "https://w", "url": "https://u"}) == "https://w"
    assert extract_site_url({"url": "https://u"}) == "https://u"
    assert extract_site_url({"latestVersion": {"demoUrl": "https://v"}}) == "https://v"


def test_extract_site_url_skips_blank_values():
    assert extract_site_url({"demo": "", "webUrl": "   ", "url": "https://u"}) == "https://u"
    assert extract_site_url({"demo": None, "latestVersion": {"demoUrl": ""}}) is None


def test_extract_site_url_missing():
    assert extract_site_url({}) is None
    assert extract_site_url(None) is None
    assert extract_site_url(["https://u"]) is None


def test_extract_chat_id_priority_and_fallback():
    assert extract_chat_id({"id": "a", "chatId": "b", "chat_id": "c"}, "in") == "a"
    assert extract_chat_id({"chatId": "b", "chat_id": "c"}, "in") == "b"
    assert extract_chat_id({"chat_id": "c"}, "in") == "c"
    assert extract_chat_id({}, "in") == "in"
    assert extract_chat_id({}, None) is None
    assert extract_chat_id(None, "") is None


def make_client(handler):
    return SiteBuilderClient(
        api_key="v0-key",
        base_url="https://api.v0.test/v1/",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_create_chat_posts_message():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "c1", "demo": "https://demo.test/c1"})

    data = await make_client(handler).create_chat("hello")

    assert data == {"id": "c1", "demo": "https://demo.test/c1"}
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/chats"
    assert seen[0].headers["Authorization"] == "Bearer v0-key"
    assert json.loads(seen[0].content) == {"message": "hello"}


@pytest.mark.asyncio
async def test_send_message_targets_existing_chat():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "c9", "webUrl": "https://w"})

    await make_client(handler).send_message("c9", "edit it")

    assert seen[0].url.path == "/v1/chats/c9/messages"
    assert json.loads(seen[0].content) == {"message": "edit it"}


@pytest.mark.asyncio
async def test_http_error_raises_site_generation_error():
    client = make_client(lambda request: httpx.Response(500, text="upstream down"))
    with pytest.raises(SiteGenerationError) as exc:
        await client.create_chat("hello")
    assert "500" in exc.value.message


@pytest.mark.asyncio
async def test_network_error_raises_site_generation_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SiteGenerationError):
        await make_client(handler).create_chat("hello")


@pytest.mark.asyncio
async def test_missing_key_raises_without_request():
    calls = []
    client = SiteBuilderClient(
        api_key="",
        base_url="https://api.v0.test/v1",
        transport=httpx.MockTransport(lambda r: calls.append(r) or httpx.Response(200, json={})),
    )
    with pytest.raises(SiteGenerationError):
        await client.create_chat("hello")
    assert calls == []

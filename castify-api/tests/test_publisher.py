"""Tests for NeynarPublisher request shape and failure handling."""
import json

import httpx
import pytest

from castify.errors import ConfigurationError, ErrorKind, PublishError
from castify.models import CastPayload, Embed
from castify.services.publisher import CAST_PATH, NeynarPublisher

PAYLOAD = CastPayload(
    text="Cool Clip\n\nhttps://example.com/video\n\n#Castify",
    embeds=(Embed(url="https://example.com/video"), Embed(url="https://example.com/c.png")),
)


def make_publisher(handler) -> NeynarPublisher:
    client = httpx.AsyncClient(
        base_url="https://api.neynar.com/", transport=httpx.MockTransport(handler)
    )
    return NeynarPublisher(client, api_key="secret", signer_uuid="signer-1")


class TestConstruction:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            NeynarPublisher(httpx.AsyncClient(), api_key="", signer_uuid="signer-1")

    def test_requires_signer(self):
        with pytest.raises(ConfigurationError):
            NeynarPublisher(httpx.AsyncClient(), api_key="secret", signer_uuid="")


@pytest.mark.anyio
class TestPublish:
    async def test_success(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["api_key"] = request.headers["x-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "cast": {"hash": "0xabc"}})

        result = await make_publisher(handler).publish(PAYLOAD)

        assert result.hash == "0xabc"
        assert result.text == PAYLOAD.text
        assert result.embeds == PAYLOAD.embeds
        assert seen["url"] == "https://api.neynar.com" + CAST_PATH
        assert seen["api_key"] == "secret"
        assert seen["body"] == {
            "signer_uuid": "signer-1",
            "text": PAYLOAD.text,
            "embeds": [
                {"url": "https://example.com/video"},
                {"url": "https://example.com/c.png"},
            ],
        }

    async def test_rejection_uses_upstream_message_and_status(self):
        def handler(request):
            return httpx.Response(403, json={"message": "Signer not approved"})

        with pytest.raises(PublishError) as info:
            await make_publisher(handler).publish(PAYLOAD)
        assert info.value.kind is ErrorKind.PUBLISH_REJECTED
        assert info.value.http_status == 403
        assert info.value.message == "Publish failed: Signer not approved"

    async def test_rate_limited_without_json_body(self):
        def handler(request):
            return httpx.Response(429, text="slow down")

        with pytest.raises(PublishError) as info:
            await make_publisher(handler).publish(PAYLOAD)
        assert info.value.http_status == 429
        assert info.value.message == "Publish failed: HTTP error 429"

    async def test_malformed_success_body(self):
        def handler(request):
            return httpx.Response(200, json={"success": True})

        with pytest.raises(PublishError) as info:
            await make_publisher(handler).publish(PAYLOAD)
        assert info.value.http_status == 500

    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(PublishError) as info:
            await make_publisher(handler).publish(PAYLOAD)
        assert info.value.kind is ErrorKind.PUBLISH_REJECTED
        assert info.value.http_status == 500

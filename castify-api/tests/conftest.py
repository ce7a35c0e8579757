import httpx
import pytest

from castify.config import ImagePolicy, Settings
from castify.models import CastPayload, PublishResult
from castify.services.fetcher import PageFetcher
from castify.services.metadata import MetadataService
from castify.services.payload import CastPayloadBuilder
from castify.services.pipeline import CastPipeline

VIDEO_URL = "https://example.com/video"

PAGE_WITH_IMAGE = """
<html>
  <head>
    <meta property="og:title" content="Cool Clip">
    <meta property="og:image" content="/img/cover.png">
  </head>
  <body>video</body>
</html>
"""

PAGE_WITHOUT_IMAGE = """
<html>
  <head><meta property="og:title" content="Cool Clip"></head>
  <body>video</body>
</html>
"""


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        neynar_api_key="test-key",
        neynar_signer_uuid="test-signer",
    )


class RecordingPublisher:
    """Stands in for the publish API and remembers what it was asked to send."""

    def __init__(self, cast_hash="0xabc", error=None):
        self.cast_hash = cast_hash
        self.error = error
        self.calls: list[CastPayload] = []

    async def publish(self, payload: CastPayload) -> PublishResult:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return PublishResult(hash=self.cast_hash, text=payload.text, embeds=payload.embeds)


def page_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def html_handler(html: str, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=html, headers={"Content-Type": "text/html"})

    return handler


def make_pipeline(
    handler,
    publisher,
    image_policy=ImagePolicy.REQUIRED,
    include_image_embed=True,
) -> CastPipeline:
    return CastPipeline(
        fetcher=PageFetcher(
            page_client(handler),
            timeout=10.0,
            user_agent="Mozilla/5.0 Test",
            accept="text/html",
        ),
        extractor=MetadataService(),
        builder=CastPayloadBuilder(include_image_embed=include_image_embed),
        publisher=publisher,
        image_policy=image_policy,
    )


@pytest.fixture
def publisher():
    return RecordingPublisher()

import logging

import httpx
from pydantic import HttpUrl, TypeAdapter, ValidationError

from castify.config import ImagePolicy
from castify.errors import BadRequestError, CastifyError, InternalError, ParseError
from castify.models import CastPreview, PublishResult
from castify.services.fetcher import PageFetcher
from castify.services.metadata import MetadataService
from castify.services.payload import CastPayloadBuilder
from castify.services.publisher import Publisher

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(HttpUrl)


def validate_source_url(url: str | None) -> str:
    """Reject anything that is not an absolute http(s) URL.

    The URL is returned untouched, so the raw string is checked as httpx will
    send it, not only pydantic's normalised form.
    """
    if not url:
        raise BadRequestError("Missing video URL.")
    invalid = BadRequestError("Invalid video URL. Use an absolute http(s) link.")
    try:
        _http_url.validate_python(url)
        parsed = httpx.URL(url)
    except (ValidationError, httpx.InvalidURL) as exc:
        raise invalid from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise invalid
    return url


class CastPipeline:
    """Fetch -> extract -> build -> publish for a single URL.

    Holds no per-request state, so one instance serves every request.
    Every failure leaves as a ``CastifyError``.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcher,
        extractor: MetadataService,
        builder: CastPayloadBuilder,
        publisher: Publisher,
        image_policy: ImagePolicy = ImagePolicy.REQUIRED,
    ):
        self.fetcher = fetcher
        self.extractor = extractor
        self.builder = builder
        self.publisher = publisher
        self.image_policy = image_policy

    async def preview(self, url: str | None) -> CastPreview:
        try:
            return await self._prepare(url)
        except CastifyError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error preparing cast for %s", url)
            raise InternalError() from exc

    async def convert(self, url: str | None) -> PublishResult:
        try:
            preview = await self._prepare(url)
            return await self.publisher.publish(preview.payload)
        except CastifyError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error converting %s", url)
            raise InternalError() from exc

    async def _prepare(self, url: str | None) -> CastPreview:
        source_url = validate_source_url(url)
        html = await self.fetcher.fetch(source_url)
        metadata = self.extractor.extract(html, source_url)

        if metadata.image_url is None and self.image_policy is ImagePolicy.REQUIRED:
            logger.warning("No og:image on %s", source_url)
            raise ParseError()

        payload = self.builder.build(metadata, source_url)
        return CastPreview(payload=payload, metadata=metadata)

import logging

import anyio
import httpx

from castify.errors import (
    BadRequestError,
    FetchTimeoutError,
    UpstreamHTTPError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 2 * 1024 * 1024
MEDIA_TYPE_PREFIXES = ("image/", "video/", "audio/", "application/octet-stream")


class PageFetcher:
    """Fetch raw HTML for a URL with a browser-like identity.

    The client is owned by the application lifespan; this class never closes
    it. No caching and no retries. ``timeout`` bounds the whole fetch, body
    included, and at most ``max_bytes`` of the body are read.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout: float,
        user_agent: str,
        accept: str,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.client = client
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.headers = {"User-Agent": user_agent, "Accept": accept}

    async def fetch(self, url: str) -> str:
        logger.info("Fetching %s", url)
        try:
            with anyio.fail_after(self.timeout):
                return await self._get(url)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Timed out after %ss fetching %s", self.timeout, url)
            raise FetchTimeoutError() from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise BadRequestError("Invalid video URL. Use an absolute http(s) link.") from exc
        except httpx.RequestError as exc:
            logger.warning("Failed to reach %s: %s", url, exc)
            raise UpstreamUnreachableError() from exc

    async def _get(self, url: str) -> str:
        async with self.client.stream(
            "GET",
            url,
            headers=self.headers,
            timeout=self.timeout,
            follow_redirects=True,
        ) as response:
            if not response.is_success:
                logger.warning("Fetching %s returned HTTP %s", url, response.status_code)
                raise UpstreamHTTPError(response.status_code)

            content_type = response.headers.get("Content-Type", "").lower()
            if content_type.startswith(MEDIA_TYPE_PREFIXES):
                logger.info("Skipping %s body of %s", content_type, url)
                return ""

            body = await self._read_capped(response)
            try:
                return body.decode(response.charset_encoding or "utf-8", errors="replace")
            except LookupError:
                # unknown charset label
                return body.decode("utf-8", errors="replace")

    async def _read_capped(self, response: httpx.Response) -> bytes:
        # Open Graph tags live in <head>; the rest of a large page is not needed.
        chunks = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size >= self.max_bytes:
                logger.info("Truncated %s at %s bytes", response.url, self.max_bytes)
                break
        return b"".join(chunks)[: self.max_bytes]

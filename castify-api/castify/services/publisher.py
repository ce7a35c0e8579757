import logging
from typing import Any, Protocol

import httpx

from castify.errors import ConfigurationError, PublishError
from castify.models import CastPayload, PublishResult

logger = logging.getLogger(__name__)

CAST_PATH = "/v2/farcaster/cast"


class Publisher(Protocol):
    async def publish(self, payload: CastPayload) -> PublishResult:
        ...


class NeynarPublisher:
    """Publish casts through the Neynar API under a single approved signer.

    Built once at startup and shared by every request. One attempt per cast,
    no retries.
    """

    def __init__(self, client: httpx.AsyncClient, *, api_key: str, signer_uuid: str):
        if not api_key or not signer_uuid:
            raise ConfigurationError("Publisher requires an API key and a signer")
        self.client = client
        self.api_key = api_key
        self.signer_uuid = signer_uuid

    async def publish(self, payload: CastPayload) -> PublishResult:
        body = {
            "signer_uuid": self.signer_uuid,
            "text": payload.text,
            "embeds": [{"url": embed.url} for embed in payload.embeds],
        }
        try:
            response = await self.client.post(
                CAST_PATH, json=body, headers={"x-api-key": self.api_key}
            )
        except httpx.TimeoutException as exc:
            raise PublishError("Publish failed: the publish API timed out") from exc
        except httpx.RequestError as exc:
            raise PublishError("Publish failed: could not reach the publish API") from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning("Publish API returned HTTP %s: %s", response.status_code, message)
            raise PublishError(
                f"Publish failed: {message}", http_status=response.status_code
            )

        cast_hash = _cast_hash(response)
        if not cast_hash:
            raise PublishError("Publish failed: malformed response from the publish API")

        logger.info("Published cast %s", cast_hash)
        return PublishResult(hash=cast_hash, text=payload.text, embeds=payload.embeds)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    data = _json_or_none(response)
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return f"HTTP error {response.status_code}"


def _cast_hash(response: httpx.Response) -> str | None:
    data = _json_or_none(response)
    if not isinstance(data, dict):
        return None
    cast = data.get("cast")
    if isinstance(cast, dict) and isinstance(cast.get("hash"), str):
        return cast["hash"]
    return None

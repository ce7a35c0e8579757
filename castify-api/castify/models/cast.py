from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class PageMetadata:
    title: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Embed:
    url: str


@dataclass(frozen=True)
class CastPayload:
    """Text and embeds exactly as they will be sent to the publish API."""

    text: str
    embeds: tuple[Embed, ...] = field(default_factory=tuple)

    @property
    def source_url(self) -> str:
        return self.embeds[0].url


@dataclass(frozen=True)
class PublishResult:
    hash: str
    text: str
    embeds: tuple[Embed, ...]


@dataclass(frozen=True)
class CastPreview:
    payload: CastPayload
    metadata: PageMetadata

from urllib.parse import quote

from castify.models import CastPayload, Embed, PageMetadata

ELLIPSIS = "…"


class CastPayloadBuilder:
    """Turn extracted metadata into the text and embeds of a cast.

    ``build`` is pure. The first embed is always the source URL exactly as the
    user submitted it so the client renders a preview of that link.
    """

    def __init__(
        self,
        *,
        hashtag: str = "#Castify",
        prefix: str = "",
        include_image_embed: bool = True,
        max_bytes: int = 320,
    ):
        self.hashtag = hashtag
        self.prefix = prefix
        self.include_image_embed = include_image_embed
        self.max_bytes = max_bytes

    def build(self, metadata: PageMetadata, source_url: str) -> CastPayload:
        embeds = [Embed(url=source_url)]
        if self.include_image_embed and metadata.image_url:
            embeds.append(Embed(url=metadata.image_url))
        return CastPayload(
            text=self.format_text(metadata.title, source_url),
            embeds=tuple(embeds),
        )

    def format_text(self, title: str, source_url: str) -> str:
        text = self._render(title, source_url)
        overflow = len(text.encode("utf-8")) - self.max_bytes
        if overflow <= 0:
            return text
        # Only the title is shortened; URL and hashtag stay intact.
        encoded = title.encode("utf-8")
        keep = len(encoded) - overflow - len(ELLIPSIS.encode("utf-8"))
        short = encoded[: max(keep, 0)].decode("utf-8", errors="ignore").rstrip()
        if not short:
            # URL and hashtag alone do not fit; the publish API reports that.
            return text
        return self._render(short + ELLIPSIS, source_url)

    def _render(self, title: str, source_url: str) -> str:
        return f"{self.prefix}{title}\n\n{source_url}\n\n{self.hashtag}"


def cast_url(web_client_base_url: str, cast_hash: str) -> str:
    return f"{web_client_base_url.rstrip('/')}/~/casts/{cast_hash}"


def composer_url(web_client_base_url: str, payload: CastPayload) -> str:
    """Compose-intent link that opens the client with the source URL embedded."""
    query = "text={}&embeds[]={}".format(
        quote(payload.text, safe=""), quote(payload.source_url, safe="")
    )
    return f"{web_client_base_url.rstrip('/')}/~/compose?{query}"

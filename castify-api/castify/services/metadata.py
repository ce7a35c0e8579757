from typing import Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from castify.models import PageMetadata


class MetadataService:
    """Extract Open Graph title and image from a page.

    Never raises: missing tags become the fallback title or an absent image.
    """

    def __init__(self, fallback_title: str = "Watch this video!"):
        self.fallback_title = fallback_title

    def extract(self, html: str, source_url: str) -> PageMetadata:
        soup = BeautifulSoup(html or "", "html.parser")

        title = _meta_content(soup, "og:title")
        title = " ".join(title.split()) if title else ""

        image = _meta_content(soup, "og:image")
        image_url = resolve_image_url(image, source_url) if image else None

        return PageMetadata(title=title or self.fallback_title, image_url=image_url)


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    # Some sites put Open Graph keys in name= instead of property=.
    for attr in ("property", "name"):
        for meta in soup.find_all("meta", attrs={attr: key}):
            content = (meta.get("content") or "").strip()
            if content:
                return content
    return None


def resolve_image_url(value: str, source_url: str) -> str:
    """Make an og:image value absolute against the page it came from.

    ``/img/cover.png`` on ``https://example.com/watch?id=1`` becomes
    ``https://example.com/img/cover.png``.
    """
    if urlsplit(value).scheme:
        return value
    return urljoin(source_url, value)

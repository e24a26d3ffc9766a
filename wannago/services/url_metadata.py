"""Page metadata extraction for bookmark URLs."""

from __future__ import annotations

import logging
from html.parser import HTMLParser
from urllib.parse import urljoin, urlparse

import httpx
from pydantic import BaseModel

from wannago.core.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 500


class UrlMetadata(BaseModel):
    url: str
    title: str = ""
    description: str = ""
    image: str = ""
    site_name: str = ""
    favicon: str = ""
    success: bool
    error: str | None = None


class _MetadataParser(HTMLParser):
    """Collects <title>, <meta> and icon <link> values from a page."""

    def __init__(self) -> None:
        super().__init__()
        self.title_parts: list[str] = []
        self.meta: dict[str, str] = {}
        self.icons: dict[str, str] = {}
        self._in_title = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attributes = {name.lower(): value or "" for name, value in attrs}
        if tag == "title":
            self._in_title = True
        elif tag == "meta":
            key = attributes.get("property") or attributes.get("name")
            if key and "content" in attributes:
                # First occurrence wins, like a DOM query would
                self.meta.setdefault(key.lower(), attributes["content"])
        elif tag == "link":
            rel = attributes.get("rel", "").lower()
            if rel in ("icon", "shortcut icon") and attributes.get("href"):
                self.icons.setdefault(rel, attributes["href"])

    def handle_endtag(self, tag: str) -> None:
        if tag == "title":
            self._in_title = False

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self.title_parts.append(data)

    def first_meta(self, *keys: str) -> str:
        for key in keys:
            value = self.meta.get(key, "").strip()
            if value:
                return value
        return ""


def parse_metadata(url: str, html: str) -> UrlMetadata:
    """Extract metadata from an already-fetched HTML document."""
    parser = _MetadataParser()
    parser.feed(html)

    title = "".join(parser.title_parts).strip() or parser.first_meta(
        "og:title", "twitter:title"
    )
    description = parser.first_meta("og:description", "description", "twitter:description")
    image = parser.first_meta("og:image", "twitter:image")
    site_name = parser.first_meta("og:site_name", "application-name")

    favicon = parser.icons.get("icon") or parser.icons.get("shortcut icon") or "/favicon.ico"
    if not favicon.startswith("http"):
        parsed = urlparse(url)
        favicon = urljoin(f"{parsed.scheme}://{parsed.netloc}", favicon)

    return UrlMetadata(
        url=url,
        title=title[:MAX_TITLE_LENGTH],
        description=description[:MAX_DESCRIPTION_LENGTH],
        image=image,
        site_name=site_name,
        favicon=favicon,
        success=True,
    )


async def fetch_url_metadata(url: str) -> UrlMetadata:
    """Fetch ``url`` and extract its metadata. Never raises."""
    settings = get_settings()
    try:
        async with httpx.AsyncClient(
            timeout=settings.url_fetch_timeout_seconds,
            follow_redirects=True,
        ) as client:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
        return parse_metadata(url, response.text)
    except Exception as exc:
        logger.warning("Metadata fetch failed for %s: %s", url, exc)
        return UrlMetadata(url=url, success=False, error=str(exc) or type(exc).__name__)

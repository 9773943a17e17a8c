"""
Metadata scraping for submitted URLs.

Fetches a page with httpx and reads its title, description and favicon
with BeautifulSoup. Scraping is best-effort: a page without the tags
yields empty strings, while fetch failures surface as API errors.
"""

import logging
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from ..exceptions import FetchTimeoutError, NetworkError
from ..schemas.metadata import PageMetadata
from .bookmark_service import validate_url

logger = logging.getLogger(__name__)

# Default timeout in seconds
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; BookmarkManager/1.0)"


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def _favicon_href(soup: BeautifulSoup) -> str:
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        rel = [value.lower() for value in rel]
        if "icon" in rel:
            return link["href"].strip()
    return ""


def parse_metadata(html: str, url: str) -> PageMetadata:
    """
    Extract page metadata from an HTML document.

    Title comes from ``<title>`` falling back to ``og:title``; description
    from ``meta[name=description]`` falling back to ``og:description``;
    favicon from ``link[rel=icon]`` or ``shortcut icon``, made absolute
    against ``url``.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text().strip() if soup.title else ""
    if not title:
        title = _meta_content(soup, property="og:title")

    description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )

    favicon = _favicon_href(soup)
    if favicon:
        favicon = urljoin(url, favicon)

    return PageMetadata(url=url, title=title, description=description, favicon=favicon)


class MetadataFetcher:
    """
    Downloads pages and extracts their metadata.

    Args:
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request
        transport: Optional httpx transport, used by tests to avoid the network
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def fetch(self, url: str) -> PageMetadata:
        url = validate_url(url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Timed out fetching metadata for %s", url)
            raise FetchTimeoutError(f"Request exceeded {self.timeout} seconds timeout")
        except httpx.HTTPStatusError as e:
            logger.warning("Metadata fetch for %s returned %s", url, e.response.status_code)
            raise NetworkError(f"Page returned status {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch metadata for %s: %s", url, e)
            raise NetworkError(f"Failed to fetch URL: {e}")

        # Relative favicons resolve against the final URL after redirects
        metadata = parse_metadata(response.text, str(response.url))
        return metadata.model_copy(update={"url": url})

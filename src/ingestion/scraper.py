"""Portfolio site page fetcher.

Fetches site-relative paths (e.g. "/about") from the configured site URL
and returns the cleaned page text.
"""

import logging
from dataclasses import dataclass

import requests

from src.errors import SourceFetchError
from src.ingestion.cleaner import clean_html_text

logger = logging.getLogger(__name__)


def build_page_url(site_url: str, path: str) -> str:
    """Join the site URL and a site-relative path.

    build_page_url("https://example.dev/", "about") -> "https://example.dev/about"
    """
    if path.startswith(("http://", "https://")):
        return path
    return f"{site_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass
class FetchedPage:
    """A fetched page: the absolute URL, its raw HTML, and its cleaned text."""

    path: str
    url: str
    raw_html: str
    text: str


class PageFetcher:
    """Fetches and cleans pages of a single site over HTTP."""

    def __init__(
        self,
        site_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.site_url = site_url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, path: str) -> FetchedPage:
        """Fetch a site-relative path and extract its text.

        Raises SourceFetchError if the request fails or returns an error status.
        """
        url = build_page_url(self.site_url, path)
        logger.info("Fetching %s", url)
        try:
            resp = self._session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceFetchError(path, str(e)) from e

        raw_html = resp.text
        return FetchedPage(path=path, url=url, raw_html=raw_html, text=clean_html_text(raw_html))

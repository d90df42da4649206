"""
Page Fetcher
Retrieves raw HTML with browser-like headers and recognises anti-bot interstitials
"""
from datetime import datetime
import logging
from pathlib import Path
from typing import Dict, Optional

import httpx

from config import Settings
from utils.exceptions import ChallengeDetected, FetchError, FetchTimeoutError


logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-AU,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "same-origin",
}

# A challenge page needs both a phrase and a vendor marker
CHALLENGE_PHRASES = (
    "checking your browser",
    "just a moment",
    "verify you are human",
    "enable javascript and cookies",
    "attention required",
)
CHALLENGE_VENDORS = (
    "cloudflare",
    "cf-chl",
    "ddos-guard",
    "sucuri",
    "incapsula",
    "perimeterx",
)


def is_challenge_page(body: str) -> bool:
    lowered = str(body or "").lower()
    return any(p in lowered for p in CHALLENGE_PHRASES) and any(v in lowered for v in CHALLENGE_VENDORS)


class PageFetcher:
    """
    Async HTML fetcher bound to one site.

    Usage:
        async with PageFetcher(settings) as fetcher:
            html = await fetcher.fetch(url)
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.site.base_url
        self.timeout = settings.scraper.request_timeout
        self.debug_dir = Path(settings.scraper.debug_dir)
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
            )
        return self._client

    def headers_for(self, url: str) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        root = self.base_url.rstrip("/")
        if url.rstrip("/") != root:
            headers["Referer"] = root + "/"
        return headers

    async def fetch(self, url: str) -> str:
        """
        Fetch a page.

        Raises:
            FetchTimeoutError: no response within the timeout
            ChallengeDetected: body is an anti-automation interstitial
            FetchError: transport failure or non-2xx status
        """
        client = self._get_client()
        logger.debug("GET %s", url)
        try:
            response = await client.get(url, headers=self.headers_for(url), timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f"Timed out after {self.timeout}s fetching {url}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed for {url}: {e}", url=url) from e

        body = response.text
        if is_challenge_page(body):
            artifact = self._save_challenge(url, body)
            raise ChallengeDetected(
                f"Anti-automation challenge returned for {url}",
                url=url,
                status=response.status_code,
                artifact_path=str(artifact) if artifact else None,
            )

        if not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} for {url}",
                url=url,
                status=response.status_code,
            )
        return body

    def _save_challenge(self, url: str, body: str) -> Optional[Path]:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        path = self.debug_dir / f"challenge-{stamp}.html"
        try:
            self.debug_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(f"<!-- {url} -->\n{body}", encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write challenge artifact %s: %s", path, e)
            return None
        logger.warning("Challenge page from %s saved to %s", url, path)
        return path

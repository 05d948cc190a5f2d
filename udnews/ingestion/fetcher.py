"""Feed fetcher with a hard per-request time budget."""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from ..config.models import DEFAULT_USER_AGENT
from ..errors import FetchError

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/xml, text/xml, */*;q=0.8"


class FeedFetcher:
    """Retrieve raw feed documents over HTTP.

    Failures of any kind surface as ``FetchError``. There are no retries
    here; a failed source is attempted again on the next scheduled run.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize feed fetcher.

        Args:
            timeout: Hard time budget for one fetch, in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (used to stub the network)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        """Browser-like identification headers."""
        return {
            "User-Agent": self.user_agent,
            "Accept": FEED_ACCEPT,
            "Accept-Language": "th,en-US;q=0.9,en;q=0.8",
            "Cache-Control": "no-cache",
        }

    async def fetch(self, url: str) -> str:
        """
        Fetch a feed and return its body text.

        An empty response body is returned as an empty string.

        Raises:
            FetchError: on non-2xx status, network failure or timeout
        """
        try:
            return await asyncio.wait_for(self._get(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Fetch of %s exceeded %.1fs budget", url, self.timeout)
            raise FetchError(url, "timeout")

    async def _get(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=self.headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text or ""

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise FetchError(
                url,
                f"HTTP {status_code}: {e.response.reason_phrase}",
                status_code=status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise FetchError(url, "timeout") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"Network error: {e}") from e

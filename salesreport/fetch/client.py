"""HTTP client for the product-sale feed, with retries."""
import logging
from typing import Any, Optional

import httpx
import orjson
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from salesreport.config import config
from salesreport.errors import ImportFailed

logger = logging.getLogger(__name__)


def is_retryable_status(response: httpx.Response) -> bool:
    """Check if status code is retryable."""
    return response.status_code in (429, 500, 502, 503, 504)


class FeedClient:
    """Fetches and decodes the JSON feed."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        limits = httpx.Limits(max_connections=10, max_keepalive_connections=5)
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=config.TIMEOUT,
            follow_redirects=True,
            limits=limits,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(config.MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(
            (httpx.TimeoutException, httpx.NetworkError, httpx.HTTPStatusError)
        ),
        reraise=True,
    )
    async def fetch_json(self, url: str) -> Any:
        """GET ``url`` and decode the body as JSON."""
        try:
            response = await self.client.get(url)
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            logger.warning(f"Network error for {url}: {e}")
            raise

        if is_retryable_status(response):
            logger.warning(f"Feed returned {response.status_code} for {url}, retrying")
            response.raise_for_status()
        if response.status_code >= 400:
            raise ImportFailed(
                "Feed request failed", error=f"HTTP {response.status_code} for {url}"
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ImportFailed("Feed is not valid JSON", error=str(e)) from e

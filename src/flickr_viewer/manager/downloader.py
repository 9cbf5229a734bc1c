"""Download image bytes from Flickr's static servers."""

import logging

import httpx

from flickr_viewer.config import HTTP_TIMEOUT
from flickr_viewer.errors import NetworkError

logger = logging.getLogger(__name__)


class ImageFetcher:
    """Fetch the raw bytes of a photo. Failures are not retried."""

    def __init__(
        self,
        timeout: float | None = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to download {url}: {exc}") from exc

        content = resp.content
        logger.debug("Downloaded %d bytes from %s", len(content), url)
        return content

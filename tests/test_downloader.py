"""Tests for the image fetcher."""

import httpx
import pytest

from flickr_viewer.errors import NetworkError
from flickr_viewer.manager.downloader import ImageFetcher

URL = "https://farm1.staticflickr.com/1234/12345_xyz.jpg"


@pytest.mark.asyncio
async def test_fetch_returns_body_bytes(jpeg_bytes):
    requests: list[httpx.Request] = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, content=jpeg_bytes)

    fetcher = ImageFetcher(transport=httpx.MockTransport(handler))
    data = await fetcher.fetch(URL)

    assert data == jpeg_bytes
    assert [str(r.url) for r in requests] == [URL]


@pytest.mark.asyncio
async def test_fetch_error_status_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    fetcher = ImageFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError):
        await fetcher.fetch(URL)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_fetch_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = ImageFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as excinfo:
        await fetcher.fetch(URL)
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)

"""Shared test fixtures."""

import asyncio
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from flickr_viewer.errors import FlickrViewerError
from flickr_viewer.models import SearchResult

SEARCH_XML = """<?xml version="1.0" encoding="utf-8" ?>
<rsp stat="ok">
<photos page="1" pages="1" perpage="500" total="2">
  <photo id="53912345678" owner="1@N00" secret="abc123" server="65535" farm="66"
         title="Sunset at the beach" ispublic="1" isfriend="0" isfamily="0" />
  <photo id="12345" owner="2@N00" secret="xyz" server="1234" farm="1"
         title="Waves" ispublic="1" isfriend="0" isfamily="0" />
</photos>
</rsp>"""

EMPTY_XML = """<?xml version="1.0" encoding="utf-8" ?>
<rsp stat="ok">
<photos page="1" pages="0" perpage="500" total="0">
</photos>
</rsp>"""

FAIL_XML = """<?xml version="1.0" encoding="utf-8" ?>
<rsp stat="fail">
  <err code="100" msg="Invalid API Key (Key has invalid format)" />
</rsp>"""


def make_image_bytes(width: int = 1000, height: int = 667, fmt: str = "JPEG") -> bytes:
    """Encode a solid-colour image of the given size."""
    mode = "RGBA" if fmt == "PNG" else "RGB"
    buffer = BytesIO()
    Image.new(mode, (width, height), color="orange").save(buffer, format=fmt)
    return buffer.getvalue()


def make_result(photo_id: str = "12345", secret: str = "xyz", title: str = "Waves") -> SearchResult:
    """Helper to create a SearchResult with consistent derived fields."""
    return SearchResult(
        title=title,
        image_url=f"https://farm1.staticflickr.com/1234/{photo_id}_{secret}.jpg",
        original_file_name=f"{photo_id}_{secret}.jpg",
        thumbnail_file_name=f"{photo_id}_{secret}_resize.jpg",
    )


async def wait_until(predicate, attempts: int = 100) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was never reached")


class FakePresenter:
    """Records every notification the workflow sends."""

    def __init__(self, confirm: bool = True) -> None:
        self.confirm = confirm
        self.confirm_calls = 0
        self.loading_calls = 0
        self.results_shown: list[list[SearchResult]] = []
        self.no_matches_calls = 0
        self.images: list[Image.Image] = []
        self.saved: list[Path] = []
        self.thumbnails: list[Path] = []
        self.errors: list[Exception] = []

    async def confirm_cancel(self) -> bool:
        self.confirm_calls += 1
        return self.confirm

    def show_loading(self) -> None:
        self.loading_calls += 1

    def show_results(self, results) -> None:
        self.results_shown.append(list(results))

    def show_no_matches(self) -> None:
        self.no_matches_calls += 1

    def show_image(self, image) -> None:
        self.images.append(image)

    def image_saved(self, path) -> None:
        self.saved.append(path)

    def thumbnail_saved(self, path) -> None:
        self.thumbnails.append(path)

    def show_error(self, error) -> None:
        self.errors.append(error)


class FakeSearchClient:
    """Search client returning canned results; searches can be held open with ``hold``."""

    def __init__(self, results: dict[str, list[SearchResult] | Exception] | None = None) -> None:
        self.results = results or {}
        self.calls: list[str] = []
        self.cancelled: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}

    def hold(self, tags: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[tags] = gate
        return gate

    async def search(self, tags: str) -> list[SearchResult]:
        self.calls.append(tags)
        gate = self._gates.get(tags)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(tags)
                raise
        result = self.results.get(tags, [])
        if isinstance(result, FlickrViewerError):
            raise result
        return result


class FakeFetcher:
    """Fetcher returning fixed bytes (or raising) and recording requested URLs."""

    def __init__(self, data: bytes | Exception) -> None:
        self.data = data
        self.urls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if isinstance(self.data, Exception):
            raise self.data
        return self.data


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A 1000x667 JPEG."""
    return make_image_bytes(1000, 667)


@pytest.fixture
def presenter() -> FakePresenter:
    return FakePresenter()

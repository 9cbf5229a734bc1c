"""Flickr REST API client."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

import httpx

from flickr_viewer.config import (
    FLICKR_API_BASE,
    FLICKR_API_KEY,
    FLICKR_SEARCH_METHOD,
    HTTP_TIMEOUT,
    SEARCH_PER_PAGE,
)
from flickr_viewer.errors import FlickrApiError, NetworkError, ParseError
from flickr_viewer.models import SearchResult

logger = logging.getLogger(__name__)

PHOTO_ATTRIBUTES = ("id", "title", "secret", "server", "farm")


@dataclass(frozen=True)
class FlickrPhoto:
    """Metadata for a single photo from Flickr API."""

    id: str
    secret: str
    server: str
    farm: int
    title: str


class FlickrClient:
    """Client for Flickr REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or FLICKR_API_KEY
        if not self.api_key:
            raise ValueError("Flickr API key is required. Set FLICKR_API_KEY in .env file.")
        self.timeout = timeout
        self.transport = transport

    async def _call(self, params: dict[str, str]) -> str:
        """Make a Flickr API call and return the raw XML body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(FLICKR_API_BASE, params=params)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise NetworkError(f"Flickr search request failed: {exc}") from exc
        return resp.text

    async def search(self, tags: str) -> list[SearchResult]:
        """Search public photos carrying all of the given tags."""
        params = build_search_params(tags, self.api_key)
        logger.info("Searching Flickr for tags=%r", params["tags"])
        body = await self._call(params)
        photos = parse_photos(body)
        logger.info("Flickr returned %d photos for tags=%r", len(photos), params["tags"])
        return [to_search_result(photo) for photo in photos]


def normalize_tags(tags: str) -> str:
    """Turn space-separated tag text into Flickr's comma-separated form."""
    return tags.replace(" ", ",")


def build_search_params(tags: str, api_key: str) -> dict[str, str]:
    """Query parameters for a single-page, all-tags, public-only photo search."""
    return {
        "method": FLICKR_SEARCH_METHOD,
        "api_key": api_key,
        "tags": normalize_tags(tags),
        "tag_mode": "all",
        "per_page": str(SEARCH_PER_PAGE),
        "privacy_filter": "1",
    }


def parse_photos(body: str) -> list[FlickrPhoto]:
    """Extract every ``photo`` element of a search response, in document order."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed Flickr response: {exc}") from exc

    if root.get("stat") == "fail":
        err = root.find("err")
        code = err.get("code", "") if err is not None else ""
        message = err.get("msg", "") if err is not None else ""
        raise FlickrApiError(code, message)

    photos: list[FlickrPhoto] = []
    for element in root.iter("photo"):
        missing = [name for name in PHOTO_ATTRIBUTES if element.get(name) is None]
        if missing:
            raise ParseError(f"Photo element is missing attributes: {', '.join(missing)}")
        try:
            farm = int(element.get("farm"))
        except ValueError as exc:
            raise ParseError(f"Invalid farm value: {element.get('farm')!r}") from exc
        photos.append(
            FlickrPhoto(
                id=element.get("id"),
                secret=element.get("secret"),
                server=element.get("server"),
                farm=farm,
                title=element.get("title"),
            )
        )
    return photos


def build_photo_url(photo: FlickrPhoto) -> str:
    """Build the static Flickr photo URL (default size, up to 500px)."""
    return (
        f"https://farm{photo.farm}.staticflickr.com/"
        f"{photo.server}/{photo.id}_{photo.secret}.jpg"
    )


def to_search_result(photo: FlickrPhoto) -> SearchResult:
    stem = f"{photo.id}_{photo.secret}"
    return SearchResult(
        title=photo.title,
        image_url=build_photo_url(photo),
        original_file_name=f"{stem}.jpg",
        thumbnail_file_name=f"{stem}_resize.jpg",
    )

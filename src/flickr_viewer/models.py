"""Data models for search results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    """A photo from a tag search, with its download URL and local file names."""

    title: str
    image_url: str
    original_file_name: str
    thumbnail_file_name: str

    def __str__(self) -> str:
        return self.title

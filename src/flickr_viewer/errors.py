"""Errors raised by the search, fetch and save steps."""


class FlickrViewerError(Exception):
    """Base class for every failure scoped to a single user action."""


class NetworkError(FlickrViewerError):
    """The HTTP request failed or returned an error status."""


class FlickrApiError(NetworkError):
    """Flickr answered with ``stat="fail"``."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"Flickr API error {code}: {message}")
        self.code = code
        self.message = message


class ParseError(FlickrViewerError):
    """The search response was malformed or missed a photo attribute."""


class DecodeError(FlickrViewerError):
    """The downloaded bytes are not a readable image."""


class ImageWriteError(FlickrViewerError, OSError):
    """Encoding or writing an image file failed."""


class DegenerateImageError(FlickrViewerError, ArithmeticError):
    """The source image has a zero width, or the resized height collapses to zero."""

"""Terminal presenter for the search workflow."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from PIL import Image
from rich.console import Console
from rich.prompt import Confirm

from flickr_viewer.models import SearchResult


class ConsolePresenter:
    """Print workflow notifications to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def confirm_cancel(self) -> bool:
        return await asyncio.to_thread(
            Confirm.ask, "Cancel the current Flickr search?", console=self.console
        )

    def show_loading(self) -> None:
        self.console.print("Loading...")

    def show_results(self, results: Sequence[SearchResult]) -> None:
        for i, result in enumerate(results):
            self.console.print(f"  [{i:>3}] {result.title}", markup=False)

    def show_no_matches(self) -> None:
        self.console.print("No matches")

    def show_image(self, image: Image.Image) -> None:
        self.console.print(f"Image: {image.width}x{image.height} {image.format or ''}".rstrip())

    def image_saved(self, path: Path) -> None:
        self.console.print(f"The image is saved: {path}", markup=False)

    def thumbnail_saved(self, path: Path) -> None:
        self.console.print(f"The thumbnail image is saved: {path}", markup=False)

    def show_error(self, error: Exception) -> None:
        self.console.print(f"Error: {error}", style="red", markup=False)

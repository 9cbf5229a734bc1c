"""Search, select, fetch and save workflow, independent of any UI toolkit.

A presentation layer binds its "search" and "select" events to
:meth:`SearchWorkflow.search` and :meth:`SearchWorkflow.select_index`, and
renders what the workflow tells its :class:`Presenter`.

Only the search can be cancelled. Selections are never serialized against each
other: each one fetches, displays and saves independently, so after rapid
re-selection the displayed image is whichever display step finished last.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from PIL import Image

from flickr_viewer.config import THUMBNAIL_WIDTH
from flickr_viewer.errors import FlickrViewerError
from flickr_viewer.manager.downloader import ImageFetcher
from flickr_viewer.manager.flickr_client import FlickrClient
from flickr_viewer.manager.persister import ImagePersister, open_image
from flickr_viewer.models import SearchResult

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS_READY = "results_ready"
    SELECTING = "selecting"


class Presenter(Protocol):
    """Notifications the workflow sends to the UI."""

    async def confirm_cancel(self) -> bool:
        """Ask whether the outstanding search may be cancelled."""
        ...

    def show_loading(self) -> None: ...

    def show_results(self, results: Sequence[SearchResult]) -> None: ...

    def show_no_matches(self) -> None: ...

    def show_image(self, image: Image.Image) -> None: ...

    def image_saved(self, path: Path) -> None: ...

    def thumbnail_saved(self, path: Path) -> None: ...

    def show_error(self, error: Exception) -> None: ...


@dataclass
class SelectionOutcome:
    """What happened to one selection's display, save and thumbnail steps."""

    result: SearchResult
    displayed: bool = False
    original_path: Path | None = None
    thumbnail_path: Path | None = None
    errors: list[FlickrViewerError] = field(default_factory=list)


class SearchWorkflow:
    """Drive tag searches and photo selections for one UI session."""

    def __init__(
        self,
        presenter: Presenter,
        client: FlickrClient | None = None,
        fetcher: ImageFetcher | None = None,
        persister: ImagePersister | None = None,
        thumbnail_width: int = THUMBNAIL_WIDTH,
    ) -> None:
        self.presenter = presenter
        self.client = client or FlickrClient()
        self.fetcher = fetcher or ImageFetcher()
        self.persister = persister or ImagePersister()
        self.thumbnail_width = thumbnail_width

        self._state = WorkflowState.IDLE
        self._results: list[SearchResult] = []
        self._search_task: asyncio.Task | None = None
        self._pending_selections = 0

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def results(self) -> list[SearchResult]:
        return list(self._results)

    @property
    def is_searching(self) -> bool:
        return self._search_task is not None and not self._search_task.done()

    def cancel(self) -> None:
        """Cancel the outstanding search. Already-fetched images are unaffected."""
        task = self._search_task
        if task is None:
            return
        self._search_task = None
        task.cancel()
        if self._state is WorkflowState.SEARCHING:
            self._state = WorkflowState.IDLE

    async def search(self, tags: str) -> list[SearchResult] | None:
        """Run a tag search, superseding an outstanding one if the user agrees.

        Returns the new results, or ``None`` when the request was ignored,
        declined, superseded or failed.
        """
        if not tags.strip():
            logger.debug("Ignoring search with empty tags")
            return None

        if self.is_searching:
            if not await self.presenter.confirm_cancel():
                logger.info("Kept the current search; dropped request for %r", tags)
                return None
            logger.info("Cancelling the current search in favour of %r", tags)
            self.cancel()

        self._results = []
        self._state = WorkflowState.SEARCHING
        self.presenter.show_loading()

        task = asyncio.create_task(self.client.search(tags))
        self._search_task = task
        try:
            results = await task
        except asyncio.CancelledError:
            if self._search_task is task:
                # The caller itself was cancelled, not superseded
                self._search_task = None
                self._state = WorkflowState.IDLE
                raise
            logger.info("Search for %r was superseded", tags)
            return None
        except FlickrViewerError as exc:
            if self._search_task is not task:
                return None
            self._search_task = None
            self._state = WorkflowState.IDLE
            logger.debug("Search for %r failed: %s", tags, exc)
            self.presenter.show_error(exc)
            return None

        if self._search_task is not task:
            # Completed, but a newer search already took over
            return None
        self._search_task = None
        self._results = list(results)
        self._state = WorkflowState.RESULTS_READY
        if results:
            self.presenter.show_results(self.results)
        else:
            self.presenter.show_no_matches()
        return self.results

    async def select_index(self, index: int) -> SelectionOutcome:
        return await self.select_result(self._results[index])

    async def select_result(self, result: SearchResult) -> SelectionOutcome:
        """Fetch the photo, then display, save and thumbnail it concurrently."""
        outcome = SelectionOutcome(result=result)
        self._pending_selections += 1
        if self._state is WorkflowState.RESULTS_READY:
            self._state = WorkflowState.SELECTING
        try:
            try:
                data = await self.fetcher.fetch(result.image_url)
            except FlickrViewerError as exc:
                self._report(outcome, exc)
                return outcome

            steps = await asyncio.gather(
                self._display(bytes(data)),
                self._save_original(bytes(data), result.original_file_name),
                self._save_thumbnail(bytes(data), result.thumbnail_file_name),
                return_exceptions=True,
            )
            for step in steps:
                if isinstance(step, FlickrViewerError):
                    self._report(outcome, step)
                elif isinstance(step, BaseException):
                    raise step
            displayed, original_path, thumbnail_path = steps
            outcome.displayed = displayed is True
            if isinstance(original_path, Path):
                outcome.original_path = original_path
            if isinstance(thumbnail_path, Path):
                outcome.thumbnail_path = thumbnail_path
            return outcome
        finally:
            self._pending_selections -= 1
            if self._pending_selections == 0 and self._state is WorkflowState.SELECTING:
                self._state = WorkflowState.RESULTS_READY

    async def _display(self, data: bytes) -> bool:
        image = await asyncio.to_thread(open_image, data)
        self.presenter.show_image(image)
        return True

    async def _save_original(self, data: bytes, file_name: str) -> Path:
        path = await asyncio.to_thread(self.persister.save_original, data, file_name)
        self.presenter.image_saved(path)
        return path

    async def _save_thumbnail(self, data: bytes, file_name: str) -> Path:
        path = await asyncio.to_thread(
            self.persister.save_thumbnail, data, self.thumbnail_width, file_name
        )
        self.presenter.thumbnail_saved(path)
        return path

    def _report(self, outcome: SelectionOutcome, error: FlickrViewerError) -> None:
        logger.debug("Selection of %s failed: %s", outcome.result.image_url, error)
        outcome.errors.append(error)
        self.presenter.show_error(error)

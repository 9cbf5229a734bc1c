"""Gradio application for browsing Flickr tag searches."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import gradio as gr
from PIL import Image

from flickr_viewer.models import SearchResult
from flickr_viewer.workflow import SearchWorkflow

CONFIRM_TEXT = "Cancel the current Flickr search?"


class GradioPresenter:
    """Keep what the page should show, and answer cancel prompts from Yes/No buttons."""

    def __init__(self) -> None:
        self.status = ""
        self.image: Image.Image | None = None
        self._answer: asyncio.Future | None = None

    @property
    def prompt_pending(self) -> bool:
        return self._answer is not None and not self._answer.done()

    async def confirm_cancel(self) -> bool:
        # Repeated prompts share one answer
        if not self.prompt_pending:
            self._answer = asyncio.get_running_loop().create_future()
        answer = self._answer
        try:
            return await asyncio.shield(answer)
        finally:
            if self._answer is answer and answer.done():
                self._answer = None

    def answer(self, confirmed: bool) -> None:
        """Resolve a pending cancel prompt. Does nothing when none is pending."""
        if self.prompt_pending:
            self._answer.set_result(confirmed)

    def show_loading(self) -> None:
        self.status = "Loading..."
        self.image = None

    def show_results(self, results: Sequence[SearchResult]) -> None:
        self.status = f"{len(results)} photos"

    def show_no_matches(self) -> None:
        self.status = "No matches"

    def show_image(self, image: Image.Image) -> None:
        self.image = image

    def image_saved(self, path: Path) -> None:
        gr.Info(f"The image is saved: {path.name}")

    def thumbnail_saved(self, path: Path) -> None:
        gr.Info(f"The thumbnail image is saved: {path.name}")

    def show_error(self, error: Exception) -> None:
        gr.Warning(str(error))


class ViewerSession:
    """Workflow and presenter for one browser session."""

    def __init__(self, **workflow_options) -> None:
        self.presenter = GradioPresenter()
        self.workflow = SearchWorkflow(self.presenter, **workflow_options)


_sessions: dict[str, ViewerSession] = {}


def _get_session(request: gr.Request) -> ViewerSession:
    key = request.session_hash or ""
    if key not in _sessions:
        _sessions[key] = ViewerSession()
    return _sessions[key]


def _drop_session(request: gr.Request) -> None:
    """Forget a closed browser session, cancelling its outstanding search."""
    session = _sessions.pop(request.session_hash or "", None)
    if session is not None:
        session.presenter.answer(False)
        session.workflow.cancel()


def _render(session: ViewerSession) -> tuple:
    """Outputs for (results, status, image, confirm row) from the session's current state."""
    choices = [(result.title, i) for i, result in enumerate(session.workflow.results)]
    return (
        gr.update(choices=choices, value=None),
        session.presenter.status,
        session.presenter.image,
        gr.update(visible=False),
    )


async def on_search(tags: str, request: gr.Request):
    session = _get_session(request)
    workflow = session.workflow
    if workflow.is_searching:
        yield gr.update(), CONFIRM_TEXT, gr.update(), gr.update(visible=True)
    elif tags.strip():
        yield gr.update(choices=[], value=None), "Loading...", None, gr.update(visible=False)

    await workflow.search(tags)
    yield _render(session)


def on_yes(request: gr.Request):
    _get_session(request).presenter.answer(True)
    return gr.update(visible=False)


def on_no(request: gr.Request):
    _get_session(request).presenter.answer(False)
    return gr.update(visible=False)


async def on_select(index: int | None, request: gr.Request):
    session = _get_session(request)
    if index is None or not 0 <= index < len(session.workflow.results):
        return gr.update()
    await session.workflow.select_index(index)
    return session.presenter.image


def create_app() -> gr.Blocks:
    """Create the Gradio Blocks app."""
    with gr.Blocks(title="Flickr Viewer") as app:
        gr.Markdown("# Flickr Viewer")

        with gr.Row():
            tags_input = gr.Textbox(
                label="Tags", placeholder="Enter tags separated by spaces", scale=4
            )
            search_btn = gr.Button("Search", variant="primary", scale=1)

        with gr.Row(visible=False) as confirm_row:
            gr.Markdown(CONFIRM_TEXT)
            yes_btn = gr.Button("Yes")
            no_btn = gr.Button("No")

        with gr.Row():
            with gr.Column(scale=1):
                status = gr.Markdown("")
                results_list = gr.Radio(label="Photos", choices=[], type="value")
            with gr.Column(scale=2):
                picture = gr.Image(label="Photo", type="pil", interactive=False)

        search_outputs = [results_list, status, picture, confirm_row]
        for trigger in (search_btn.click, tags_input.submit):
            trigger(
                on_search,
                inputs=[tags_input],
                outputs=search_outputs,
                concurrency_limit=None,
                trigger_mode="multiple",
            )

        yes_btn.click(
            on_yes,
            inputs=None,
            outputs=[confirm_row],
            concurrency_limit=None,
        )
        no_btn.click(
            on_no,
            inputs=None,
            outputs=[confirm_row],
            concurrency_limit=None,
        )

        results_list.input(
            on_select,
            inputs=[results_list],
            outputs=[picture],
            concurrency_limit=None,
            trigger_mode="multiple",
        )

        app.unload(_drop_session)

    return app

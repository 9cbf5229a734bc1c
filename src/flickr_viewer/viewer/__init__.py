"""Flickr tag search UI with Gradio."""


def main() -> None:
    """CLI entry point for Gradio viewer UI."""
    import logging

    from rich.logging import RichHandler

    from flickr_viewer.config import FLICKR_API_KEY
    from flickr_viewer.viewer.app import create_app

    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    if not FLICKR_API_KEY:
        print("Error: FLICKR_API_KEY is not set (add it to .env)")
        return

    app = create_app()
    app.launch()

"""Terminal CLI: search Flickr by tag and save a chosen photo with its thumbnail."""

import argparse
import asyncio
import logging
from pathlib import Path

from rich.logging import RichHandler


def main() -> None:
    """CLI entry point for searching and saving photos."""
    parser = argparse.ArgumentParser(description="Flickr tag search and photo saver")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # search
    search_parser = subparsers.add_parser("search", help="List photos matching all tags")
    search_parser.add_argument("tags", nargs="+", help="Tags to search for")

    # save
    save_parser = subparsers.add_parser(
        "save", help="Search, then download, save and thumbnail one result"
    )
    save_parser.add_argument("tags", nargs="+", help="Tags to search for")
    save_parser.add_argument(
        "--index", type=int, default=0, help="Result index to save (default: 0)"
    )
    save_parser.add_argument(
        "--width", type=int, help="Thumbnail width in pixels (default: 250)"
    )
    save_parser.add_argument(
        "--out-dir", type=Path, help="Directory for saved files (default: current directory)"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    _setup_logging(args.verbose)

    if args.command == "search":
        raise SystemExit(asyncio.run(_cmd_search(args)))

    elif args.command == "save":
        raise SystemExit(asyncio.run(_cmd_save(args)))


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def _build_workflow(args: argparse.Namespace):
    """Create a workflow printing to the terminal. Returns None without an API key."""
    from flickr_viewer.config import THUMBNAIL_WIDTH
    from flickr_viewer.manager.console import ConsolePresenter
    from flickr_viewer.manager.flickr_client import FlickrClient
    from flickr_viewer.manager.persister import ImagePersister
    from flickr_viewer.workflow import SearchWorkflow

    try:
        client = FlickrClient()
    except ValueError as exc:
        print(f"Error: {exc}")
        return None

    out_dir = getattr(args, "out_dir", None)
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
    persister = ImagePersister(out_dir) if out_dir is not None else ImagePersister()

    return SearchWorkflow(
        ConsolePresenter(),
        client=client,
        persister=persister,
        thumbnail_width=getattr(args, "width", None) or THUMBNAIL_WIDTH,
    )


async def _cmd_search(args: argparse.Namespace) -> int:
    """List photos matching all tags."""
    workflow = _build_workflow(args)
    if workflow is None:
        return 1

    with workflow.presenter.console.status("Searching Flickr..."):
        results = await workflow.search(" ".join(args.tags))
    return 0 if results is not None else 1


async def _cmd_save(args: argparse.Namespace) -> int:
    """Search, then fetch one result and save it with its thumbnail."""
    workflow = _build_workflow(args)
    if workflow is None:
        return 1

    with workflow.presenter.console.status("Searching Flickr..."):
        results = await workflow.search(" ".join(args.tags))
    if not results:
        return 1
    if not 0 <= args.index < len(results):
        print(f"Error: --index must be between 0 and {len(results) - 1}")
        return 1

    with workflow.presenter.console.status(f"Downloading {results[args.index].title}..."):
        outcome = await workflow.select_index(args.index)
    return 1 if outcome.errors else 0

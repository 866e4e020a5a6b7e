"""Command line entry point.

Usage:
    python -m feed_snapshot
    feed-snapshot --feed-url https://example.com/feed --file-path feeds/example.json

Environment Variables:
    INPUT_FEED_URL: Feed URL, or a JSON array of URLs
    INPUT_FILE_PATH: Destination path, or a JSON array matching INPUT_FEED_URL
    INPUT_PARSER_OPTIONS / INPUT_FETCH_OPTIONS: JSON objects
    INPUT_REMOVE_PUBLISHED / INPUT_REMOVE_LAST_BUILD_DATE: "true" or "false"
    INPUT_MODE: "feed" (default) or "xml"
    FEED_SNAPSHOT_LOG_LEVEL / FEED_SNAPSHOT_LOG_FORMAT: logging
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import structlog

from . import actions
from .config.resolver import resolve_config
from .config.settings import ActionInputs, settings
from .errors import FeedSnapshotError
from .logging_setup import configure_logging
from .pipeline.snapshot import SnapshotPipeline
from .storage.writer import serialize

logger = structlog.get_logger()

# argparse dest -> ActionInputs field
INPUT_FLAGS = {
    "feed_url": "--feed-url",
    "file_path": "--file-path",
    "parser_options": "--parser-options",
    "fetch_options": "--fetch-options",
    "remove_published": "--remove-published",
    "remove_last_build_date": "--remove-last-build-date",
    "mode": "--mode",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-snapshot",
        description="Fetch a feed and save a JSON or XML snapshot of it",
    )
    for dest, flag in INPUT_FLAGS.items():
        parser.add_argument(flag, dest=dest, help=f"Overrides INPUT_{dest.upper()}")
    parser.add_argument("--log-level", help="Overrides FEED_SNAPSHOT_LOG_LEVEL")
    return parser


def load_inputs(args: argparse.Namespace) -> ActionInputs:
    """Read INPUT_* from the environment; command line flags take precedence."""
    overrides = {
        dest: getattr(args, dest)
        for dest in INPUT_FLAGS
        if getattr(args, dest) is not None
    }
    return ActionInputs(**overrides)


def report_saved(path: str) -> None:
    print(f"feed saved to {path} successfully")


async def run(inputs: ActionInputs) -> int:
    """Run one snapshot and report to the workflow. Returns the exit status."""
    try:
        config = resolve_config(inputs)
        pipeline = SnapshotPipeline(on_saved=report_saved)
        result = await pipeline.run(config)

        if len(result.documents) == 1:
            output = serialize(result.documents[0])
        else:
            output = serialize(result.documents)
        actions.set_output(settings.output_name, output)
    except FeedSnapshotError as e:
        logger.error("snapshot_failed", error=str(e), error_type=type(e).__name__)
        actions.set_failed(str(e))
        return 1
    except Exception as e:
        logger.exception("snapshot_crashed", error=str(e))
        actions.set_failed(str(e) or type(e).__name__)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)
    return asyncio.run(run(load_inputs(args)))


if __name__ == "__main__":
    sys.exit(main())

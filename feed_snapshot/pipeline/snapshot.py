"""Snapshot pipeline orchestration."""

from datetime import datetime
from typing import Callable, Optional

import structlog

from ..config.resolver import resolve_config
from ..config.settings import ActionInputs
from ..ingestion.fetcher import FeedFetcher
from ..ingestion.interfaces import FeedTarget, SnapshotConfig, SnapshotMode, SnapshotResult
from ..normalization.normalizer import normalize
from ..normalization.redactor import redact, strip_last_build_date
from ..storage.writer import SnapshotWriter

logger = structlog.get_logger()


class SnapshotPipeline:
    """Fetch -> normalize -> redact -> write, once per feed/destination pair.

    Pairs run strictly in order and the first error aborts the run; files
    already written for earlier pairs stay on disk.
    """

    def __init__(
        self,
        fetcher: FeedFetcher = None,
        writer: SnapshotWriter = None,
        on_saved: Optional[Callable[[str], None]] = None,
    ):
        self.fetcher = fetcher or FeedFetcher()
        self.writer = writer or SnapshotWriter()
        self.on_saved = on_saved  # Callback per written file

    async def run(self, config: SnapshotConfig) -> SnapshotResult:
        """Run every pair in ``config``."""
        start = datetime.now()
        result = SnapshotResult()

        async with self.fetcher:
            for index, target in enumerate(config.targets):
                document = await self._snapshot(index, target, config)
                result.paths.append(target.path)
                result.documents.append(document)

        logger.info(
            "snapshot_complete",
            files=len(result.paths),
            elapsed_seconds=round((datetime.now() - start).total_seconds(), 3),
        )
        return result

    async def _snapshot(self, index: int, target: FeedTarget, config: SnapshotConfig) -> dict:
        log = logger.bind(index=index, url=target.url, path=target.path)

        fetched = await self.fetcher.fetch(target.url, config.fetch_options)

        payload, document = normalize(
            fetched.body,
            config.mode,
            config.parser_options,
            extension=target.extension,
            remove_last_build_date=config.remove_last_build_date,
        )

        document = redact(
            document,
            remove_published=config.remove_published,
            remove_last_build_date=config.remove_last_build_date and config.mode is SnapshotMode.XML,
        )

        raw = payload.raw
        if config.remove_last_build_date and target.extension == ".xml":
            raw = strip_last_build_date(raw)

        self.writer.write(target.path, document, raw)
        log.info("feed_saved")

        if self.on_saved:
            self.on_saved(target.path)
        return document


async def run_snapshot(inputs: ActionInputs = None, **kwargs) -> SnapshotResult:
    """Resolve workflow inputs and run the pipeline."""
    config = resolve_config(inputs or ActionInputs())
    pipeline = SnapshotPipeline(**kwargs)
    return await pipeline.run(config)

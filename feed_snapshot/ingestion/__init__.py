"""Data ingestion - fetching raw feed payloads."""

from .interfaces import (
    FeedTarget, FetchOptions, ParserOptions, SnapshotConfig, SnapshotMode,
    FetchedFeed, ParsedPayload, PayloadKind, SnapshotResult, FetcherInterface,
)
from .fetcher import FeedFetcher

__all__ = [
    "FeedTarget", "FetchOptions", "ParserOptions", "SnapshotConfig", "SnapshotMode",
    "FetchedFeed", "ParsedPayload", "PayloadKind", "SnapshotResult",
    "FetcherInterface", "FeedFetcher",
]

"""Snapshot storage on the local filesystem."""

from .writer import SnapshotWriter, serialize

__all__ = ["SnapshotWriter", "serialize"]

"""Pipeline orchestration - one snapshot run."""

from .snapshot import SnapshotPipeline, run_snapshot

__all__ = ["SnapshotPipeline", "run_snapshot"]

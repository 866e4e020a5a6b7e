"""Error taxonomy for a snapshot run."""

from typing import Optional


class FeedSnapshotError(Exception):
    """Base class for every error reported to the workflow."""


class ConfigError(FeedSnapshotError):
    """Malformed, missing or mismatched input configuration."""


class FetchError(FeedSnapshotError):
    """Transport failure or non-2xx HTTP response."""

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class FormatError(FeedSnapshotError):
    """Payload is neither XML nor JSON, or the conversion is unsupported."""


class WriteError(FeedSnapshotError):
    """Filesystem failure while creating directories or writing the file."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path

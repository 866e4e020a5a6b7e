"""Interface definitions shared by the snapshot pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


ExtraFields = Callable[[Dict[str, Any]], Dict[str, Any]]


class SnapshotMode(Enum):
    """What kind of document is produced from the feed."""
    FEED = "feed"  # normalized feed: title, link, entries...
    XML = "xml"    # collapsed XML tree: rss.channel.item...

    @property
    def allowed_extensions(self) -> tuple:
        if self is SnapshotMode.XML:
            return (".json", ".xml")
        return (".json",)


class PayloadKind(Enum):
    """Format detected for a fetched payload."""
    XML = "xml"
    JSON = "json"


@dataclass(frozen=True)
class FeedTarget:
    """One feed source paired with the file it is saved to."""
    url: str
    path: str

    @property
    def extension(self) -> str:
        return Path(self.path).suffix.lower()


@dataclass
class FetchOptions:
    """Options passed to the HTTP request."""
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None
    proxy: Optional[str] = None
    allow_redirects: bool = True


@dataclass
class ParserOptions:
    """Options controlling feed normalization."""
    normalization: bool = True
    use_iso_date_format: bool = True
    description_max_len: int = 250
    extra_entry_fields: Optional[ExtraFields] = None
    extra_feed_fields: Optional[ExtraFields] = None


@dataclass
class SnapshotConfig:
    """Fully validated configuration for one run."""
    targets: List[FeedTarget]
    mode: SnapshotMode = SnapshotMode.FEED
    parser_options: ParserOptions = field(default_factory=ParserOptions)
    fetch_options: FetchOptions = field(default_factory=FetchOptions)
    remove_published: bool = False
    remove_last_build_date: bool = False


@dataclass
class FetchedFeed:
    """Raw response for one feed source."""
    url: str
    body: bytes
    status: int = 200
    content_type: str = ""


@dataclass
class ParsedPayload:
    """Tagged result of format detection."""
    kind: PayloadKind
    raw: bytes
    document: Dict[str, Any]


@dataclass
class SnapshotResult:
    """Outcome of a successful run."""
    paths: List[str] = field(default_factory=list)
    documents: List[Dict[str, Any]] = field(default_factory=list)


class FetcherInterface:
    """Interface for feed fetching."""

    async def fetch(self, url: str, options: FetchOptions) -> FetchedFeed:
        """Fetch the raw payload of a single feed."""
        raise NotImplementedError

"""Normalized feed documents for the ``feed`` snapshot mode.

RSS, Atom and RDF go through feedparser; JSON Feed is mapped by hand onto
the same shape::

    {
        "title": ..., "link": ..., "description": ..., "language": ...,
        "generator": ..., "published": ...,
        "entries": [{"id", "title", "link", "published", "description"}, ...]
    }
"""

import html
import io
import re
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

import feedparser

from ..ingestion.interfaces import ParserOptions


def parse_feed(raw: bytes) -> feedparser.FeedParserDict:
    """Parse XML-family feed bytes with feedparser.

    Raises:
        ValueError: If feedparser does not recognise the payload as a feed.
    """
    result = feedparser.parse(io.BytesIO(raw))
    if result.get("version", "").startswith("json"):
        raise ValueError("not an XML feed: JSON Feed")
    if not result.get("version") and not result.get("entries"):
        reason = result.get("bozo_exception") or "no feed elements found"
        raise ValueError(f"not an XML feed: {reason}")
    return result


def normalize_parsed_feed(result: feedparser.FeedParserDict, options: ParserOptions) -> Dict[str, Any]:
    """Build the normalized document from a feedparser result."""
    if not options.normalization:
        document = to_jsonable(dict(result.feed))
        document["entries"] = [to_jsonable(dict(e)) for e in result.entries]
        return document

    feed = result.feed
    document = {
        "title": feed.get("title", ""),
        "link": feed.get("link", ""),
        "description": feed.get("subtitle", ""),
        "language": feed.get("language", ""),
        "generator": feed.get("generator", ""),
        "published": _date(feed, options, "published", "updated"),
    }
    if options.extra_feed_fields:
        document.update(to_jsonable(options.extra_feed_fields(_raw_view(feed))))

    document["entries"] = [_entry(entry, options) for entry in result.entries]
    return document


def _entry(entry, options: ParserOptions) -> Dict[str, Any]:
    item = {
        "id": entry.get("id") or entry.get("link", ""),
        "title": entry.get("title", ""),
        "link": entry.get("link", ""),
        "published": _date(entry, options, "published", "updated"),
        "description": truncate(clean_html(entry.get("summary", "")), options.description_max_len),
    }
    if options.extra_entry_fields:
        item.update(to_jsonable(options.extra_entry_fields(_raw_view(entry))))
    return item


def normalize_json_feed(data: Dict[str, Any], options: ParserOptions) -> Dict[str, Any]:
    """Map a JSON Feed object onto the normalized document shape."""
    if not options.normalization:
        return data

    document = {
        "title": data.get("title", ""),
        "link": data.get("home_page_url", ""),
        "description": data.get("description", ""),
        "language": data.get("language", ""),
        "generator": "",
        "published": _json_date(data.get("published", ""), options),
    }
    if options.extra_feed_fields:
        document.update(options.extra_feed_fields(data))

    entries = []
    for item in data.get("items") or []:
        if not isinstance(item, dict):
            continue
        text = item.get("summary") or item.get("content_text") or clean_html(item.get("content_html", ""))
        entry = {
            "id": str(item.get("id") or item.get("url", "")),
            "title": item.get("title", ""),
            "link": item.get("url", ""),
            "published": _json_date(item.get("date_published") or item.get("published", ""), options),
            "description": truncate(text, options.description_max_len),
        }
        if options.extra_entry_fields:
            entry.update(options.extra_entry_fields(item))
        entries.append(entry)

    document["entries"] = entries
    return document


def _date(node, options: ParserOptions, *keys: str) -> str:
    for key in keys:
        text = node.get(key)
        if not text:
            continue
        parsed = node.get(f"{key}_parsed")
        if options.use_iso_date_format and parsed:
            return iso_timestamp(parsed)
        return text
    return ""


def _json_date(text: Any, options: ParserOptions) -> str:
    """JSON Feed dates are RFC 3339; RFC 822 shows up in the wild too."""
    if not isinstance(text, str) or not text:
        return ""
    if not options.use_iso_date_format:
        return text

    try:
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            moment = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return text
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return iso_timestamp(moment.astimezone(timezone.utc).timetuple())


def iso_timestamp(parsed: time.struct_time) -> str:
    """Format a UTC struct_time the way JavaScript's toISOString does."""
    return time.strftime("%Y-%m-%dT%H:%M:%S.000Z", parsed)


def clean_html(text: str) -> str:
    """Strip tags and decode entities."""
    if not text:
        return ""
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def truncate(text: str, max_len: int) -> str:
    if not max_len or len(text) <= max_len:
        return text
    return text[:max_len].rstrip() + "..."


def _raw_view(node) -> Dict[str, Any]:
    """Raw mapping handed to extra-field extractors."""
    view = dict(node)
    content: Optional[List] = node.get("content")
    if content and "content:encoded" not in view:
        view["content:encoded"] = content[0].get("value", "")
    return view


def to_jsonable(value: Any) -> Any:
    """Convert feedparser values (struct_time, FeedParserDict) to plain JSON types."""
    if isinstance(value, time.struct_time):
        return iso_timestamp(value)
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value

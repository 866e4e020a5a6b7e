"""Turn fetched bytes into the document that gets saved."""

from typing import Any, Dict, Tuple

import structlog

from .detector import detect_format
from .feed import normalize_json_feed, normalize_parsed_feed, parse_feed
from .redactor import strip_last_build_date
from .xml_tree import parse_tree
from ..errors import FormatError
from ..ingestion.interfaces import ParsedPayload, ParserOptions, PayloadKind, SnapshotMode

logger = structlog.get_logger()

JSON_TO_XML_UNSUPPORTED = "converting JSON feed to XML output is not supported"


def normalize(
    raw: bytes,
    mode: SnapshotMode,
    options: ParserOptions = None,
    extension: str = ".json",
    remove_last_build_date: bool = False,
) -> Tuple[ParsedPayload, Dict[str, Any]]:
    """Detect the payload format and build the normalized document.

    In feed mode ``remove_last_build_date`` strips ``<lastBuildDate>`` before
    feedparser sees it; feedparser would otherwise report it as ``updated``.

    Raises:
        FormatError: If the format is unknown, or JSON is headed for an .xml file.
    """
    options = options or ParserOptions()
    if mode is SnapshotMode.XML:
        parse_xml = parse_tree
    elif remove_last_build_date:
        def parse_xml(raw: bytes):
            return parse_feed(strip_last_build_date(raw))
    else:
        parse_xml = parse_feed

    payload = detect_format(raw, parse_xml)
    if payload.kind is PayloadKind.JSON and extension == ".xml":
        raise FormatError(JSON_TO_XML_UNSUPPORTED)

    if mode is SnapshotMode.XML:
        document = payload.document
    elif payload.kind is PayloadKind.XML:
        document = normalize_parsed_feed(payload.document, options)
    else:
        document = normalize_json_feed(payload.document, options)

    logger.info("feed_normalized", format=payload.kind.value, mode=mode.value)
    return payload, document

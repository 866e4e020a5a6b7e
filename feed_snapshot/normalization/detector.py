"""Format detection: XML first, JSON second."""

import json
from typing import Any, Callable, Dict, Optional

import structlog

from ..errors import FormatError
from ..ingestion.interfaces import ParsedPayload, PayloadKind

logger = structlog.get_logger()

UNKNOWN_FORMAT = "unknown feed format; only XML and JSON are supported"

XmlParser = Callable[[bytes], Any]


def detect_format(raw: bytes, parse_xml: XmlParser) -> ParsedPayload:
    """Parse ``raw`` as XML with ``parse_xml``, falling back to JSON.

    ``parse_xml`` raises ValueError when the bytes are not XML it understands.

    Raises:
        FormatError: If the payload is neither XML nor a JSON object.
    """
    try:
        document = parse_xml(raw)
        return ParsedPayload(kind=PayloadKind.XML, raw=raw, document=document)
    except ValueError as e:
        logger.debug("xml_parse_failed", error=str(e))

    data = parse_json(raw)
    if data is None:
        raise FormatError(UNKNOWN_FORMAT)
    return ParsedPayload(kind=PayloadKind.JSON, raw=raw, document=data)


def parse_json(raw: bytes) -> Optional[Dict[str, Any]]:
    """Decode a JSON object, or return None."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug("json_parse_failed", error=str(e))
        return None
    if not isinstance(data, dict):
        logger.debug("json_root_not_object", type=type(data).__name__)
        return None
    return data

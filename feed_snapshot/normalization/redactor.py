"""Remove volatile fields from a document before it is saved."""

import copy
import re
from typing import Any, Dict, Tuple

import structlog

logger = structlog.get_logger()

PUBLISHED_PATH: Tuple[str, ...] = ("published",)
LAST_BUILD_DATE_PATH: Tuple[str, ...] = ("rss", "channel", "lastBuildDate")

_LAST_BUILD_DATE_TAG = re.compile(rb"<lastBuildDate>.*?</lastBuildDate>", re.DOTALL)


def redact(
    document: Dict[str, Any],
    remove_published: bool = False,
    remove_last_build_date: bool = False,
) -> Dict[str, Any]:
    """Return a copy of ``document`` without the requested fields.

    A field that is not there is left alone; redacting twice is the same as
    redacting once.
    """
    if not (remove_published or remove_last_build_date):
        return document

    result = copy.deepcopy(document)
    if remove_published:
        remove_path(result, PUBLISHED_PATH)
    if remove_last_build_date:
        remove_path(result, LAST_BUILD_DATE_PATH)
    return result


def remove_path(document: Dict[str, Any], path: Tuple[str, ...]) -> bool:
    """Delete the field at ``path`` in place. Returns whether it existed."""
    node: Any = document
    for key in path[:-1]:
        if not isinstance(node, dict) or key not in node:
            return False
        node = node[key]
    if not isinstance(node, dict) or path[-1] not in node:
        return False
    del node[path[-1]]
    logger.debug("field_redacted", path=".".join(path))
    return True


def strip_last_build_date(raw: bytes) -> bytes:
    """Drop ``<lastBuildDate>`` elements from raw XML written verbatim."""
    return _LAST_BUILD_DATE_TAG.sub(b"", raw)

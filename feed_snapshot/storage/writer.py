"""Persist snapshots to disk."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog

from ..errors import WriteError

logger = structlog.get_logger()


def serialize(document: Dict[str, Any]) -> str:
    """Pretty-print a document as JSON with 2-space indentation."""
    return json.dumps(document, indent=2, ensure_ascii=False)


class SnapshotWriter:
    """Writes one snapshot file per destination."""

    def write(self, path: Union[str, Path], document: Dict[str, Any], raw: bytes = b"") -> Path:
        """Write ``document`` as JSON, or ``raw`` verbatim for .xml paths.

        Missing parent directories are created.

        Raises:
            WriteError: If the directory or the file cannot be written.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.suffix.lower() == ".xml":
                path.write_bytes(raw)
                size = len(raw)
            else:
                text = serialize(document)
                path.write_text(text, encoding="utf-8")
                size = len(text)
        except OSError as e:
            logger.error("snapshot_write_failed", path=str(path), error=str(e))
            raise WriteError(str(e), path=str(path)) from e

        logger.info("snapshot_written", path=str(path), size=size)
        return path

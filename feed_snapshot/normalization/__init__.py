"""Format detection, normalization and redaction of fetched feeds."""

from .detector import detect_format, UNKNOWN_FORMAT
from .normalizer import normalize, JSON_TO_XML_UNSUPPORTED
from .redactor import redact, strip_last_build_date

__all__ = [
    "detect_format", "UNKNOWN_FORMAT", "normalize", "JSON_TO_XML_UNSUPPORTED",
    "redact", "strip_last_build_date",
]

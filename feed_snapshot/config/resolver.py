"""Resolve raw workflow inputs into a validated SnapshotConfig.

Every check here runs before the first network call, so a bad input never
leaves a partial snapshot behind.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .fields import compile_fields
from .settings import ActionInputs
from ..errors import ConfigError
from ..ingestion.interfaces import (
    FeedTarget, FetchOptions, ParserOptions, SnapshotConfig, SnapshotMode,
)

logger = structlog.get_logger()

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)

EXTRA_FIELD_KEYS = {
    "getExtraEntryFields": "extra_entry_fields",
    "getExtraFeedFields": "extra_feed_fields",
}


def resolve_config(inputs: ActionInputs) -> SnapshotConfig:
    """Validate raw inputs and build the run configuration.

    Raises:
        ConfigError: On the first invalid input.
    """
    mode = _parse_mode(inputs.mode)

    urls = to_string_list(inputs.feed_url)
    if not _all_non_empty_strings(urls):
        raise ConfigError("feed URL is not an array of non-empty strings")

    paths = to_string_list(inputs.file_path)
    if not _all_non_empty_strings(paths):
        raise ConfigError("filePath is not an array of non-empty strings")

    if len(urls) != len(paths):
        raise ConfigError("arrays do not have the same length")

    for url in urls:
        validate_url(url)

    for path in paths:
        validate_extension(path, mode)

    parser_options = build_parser_options(decode_options(inputs.parser_options, "parser"))
    fetch_options = build_fetch_options(decode_options(inputs.fetch_options, "fetch"))

    config = SnapshotConfig(
        targets=[FeedTarget(url=u, path=p) for u, p in zip(urls, paths)],
        mode=mode,
        parser_options=parser_options,
        fetch_options=fetch_options,
        remove_published=parse_flag(inputs.remove_published, "removePublished"),
        remove_last_build_date=parse_flag(inputs.remove_last_build_date, "removeLastBuildDate"),
    )

    logger.info(
        "config_resolved",
        targets=len(config.targets),
        mode=mode.value,
        remove_published=config.remove_published,
        remove_last_build_date=config.remove_last_build_date,
    )
    return config


def to_string_list(raw: Optional[str]) -> List[Any]:
    """Turn a single value or a JSON-encoded array into a list."""
    if raw is None:
        return []
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return [raw]
    if isinstance(decoded, list):
        return decoded
    return [decoded]


def _all_non_empty_strings(values: List[Any]) -> bool:
    return bool(values) and all(isinstance(v, str) and v for v in values)


def validate_url(url: str) -> None:
    """Require an absolute http(s) URL."""
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError:
        raise ConfigError(f"invalid URL: {url}")


def validate_extension(path: str, mode: SnapshotMode) -> None:
    """Require the destination extension to be one the mode can write."""
    ext = Path(path).suffix.lower()
    allowed = mode.allowed_extensions
    if ext not in allowed:
        raise ConfigError(f"file extension must be {' or '.join(allowed)}")


def decode_options(raw: Optional[str], which: str) -> Dict[str, Any]:
    """Decode a JSON options blob; empty input means no options."""
    if raw is None or not raw.strip():
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"failed to parse {which}Options input: {e}")
    if not isinstance(decoded, dict):
        raise ConfigError(f"failed to parse {which}Options input: expected a JSON object")
    return decoded


def build_parser_options(data: Dict[str, Any]) -> ParserOptions:
    """Map decoded parserOptions onto ParserOptions."""
    options = ParserOptions()

    if "normalization" in data:
        options.normalization = _require_bool(data, "normalization", "parser")
    if "useISODateFormat" in data:
        options.use_iso_date_format = _require_bool(data, "useISODateFormat", "parser")
    if "descriptionMaxLen" in data:
        value = data["descriptionMaxLen"]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError("parserOptions.descriptionMaxLen must be a non-negative integer")
        options.description_max_len = value

    for key, attr in EXTRA_FIELD_KEYS.items():
        if key not in data:
            continue
        try:
            setattr(options, attr, compile_fields(data[key]))
        except ValueError as e:
            raise ConfigError(f"failed to evaluate {key} function: {e}")

    _warn_unknown(data, {"normalization", "useISODateFormat", "descriptionMaxLen", *EXTRA_FIELD_KEYS}, "parser")
    return options


def build_fetch_options(data: Dict[str, Any]) -> FetchOptions:
    """Map decoded fetchOptions onto FetchOptions."""
    options = FetchOptions()

    if "headers" in data:
        headers = data["headers"]
        if not isinstance(headers, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            raise ConfigError("fetchOptions.headers must be an object of strings")
        options.headers = dict(headers)
    if "timeout" in data:
        timeout = data["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("fetchOptions.timeout must be a positive number of seconds")
        options.timeout = float(timeout)
    if "proxy" in data:
        if not isinstance(data["proxy"], str):
            raise ConfigError("fetchOptions.proxy must be a string")
        options.proxy = data["proxy"]
    if "allowRedirects" in data:
        options.allow_redirects = _require_bool(data, "allowRedirects", "fetch")

    _warn_unknown(data, {"headers", "timeout", "proxy", "allowRedirects"}, "fetch")
    return options


def parse_flag(value: Optional[str], name: str) -> bool:
    """Parse a "true"/"false" input; unset means false."""
    if value is None or value == "" or value == "false":
        return False
    if value == "true":
        return True
    raise ConfigError(f'{name} must be either "true" or "false"')


def _parse_mode(value: Optional[str]) -> SnapshotMode:
    if not value:
        return SnapshotMode.FEED
    try:
        return SnapshotMode(value)
    except ValueError:
        raise ConfigError('mode must be either "feed" or "xml"')


def _require_bool(data: Dict[str, Any], key: str, which: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{which}Options.{key} must be a boolean")
    return value


def _warn_unknown(data: Dict[str, Any], known: set, which: str) -> None:
    for key in data:
        if key not in known:
            logger.warning("unknown_option_ignored", options=f"{which}Options", key=key)
